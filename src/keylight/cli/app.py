from __future__ import annotations

import logging
import sys
from typing import Annotated

import click
import typer
from typer.core import TyperGroup

from keylight.config import get_settings, log_file_from_settings
from keylight.utils.logging import setup_logging

from .commands import config as config_cmd
from .commands.detect import register as register_detect
from .commands.devices import LIGHT_COMMAND
from .commands.devices import register as register_devices
from .commands.help import register as register_help
from .commands.levels import register as register_levels
from .commands.power import register as register_power
from .common import load_settings_or_exit

logger = logging.getLogger(__name__)


class LightCommandGroup(TyperGroup):
    """Treat an unknown command name as a light identifier.

    ``keylight 2 bright +`` is dispatched as ``keylight light 2 bright +``.
    """

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and args[0] not in self.commands and not args[0].startswith("-"):
            args = [LIGHT_COMMAND, *args]
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=LightCommandGroup,
    help="Control Elgato Key Light fixtures. Run without a command for the "
    "interactive interface.",
    add_completion=False,
)

app.add_typer(config_cmd.app, name="config")

register_power(app)
register_levels(app)
register_devices(app)
register_detect(app)
register_help(app)


def _setup_logging() -> None:
    try:
        settings = get_settings()
    except (FileNotFoundError, ValueError):
        # Reported by the command itself when it loads settings.
        setup_logging()
        return
    setup_logging(settings.logging.level, log_file_from_settings(settings))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """keylight CLI."""
    _setup_logging()
    logger.info("Command line: %s", sys.argv)

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"keylight version {get_version('keylight')}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        from keylight.tui import run_tui

        settings = load_settings_or_exit()
        raise typer.Exit(run_tui(settings))
