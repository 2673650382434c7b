from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from keylight.cli.common import load_runtime_or_exit, run_command

LIGHT_COMMAND = "light"


def list_lights() -> None:
    """Show all configured lights."""
    runtime = load_runtime_or_exit()
    console = Console()
    console.print("Configured lights:")
    for ordinal, (name, address) in enumerate(
        runtime.registry.current.lights.items(), start=1
    ):
        console.print(f"  {ordinal}. {escape(name)} ({address})")


def status() -> None:
    """Show status of all lights."""
    run_command(["status"])


def light(
    identifier: Annotated[str, typer.Argument(help="Light name or number")],
    args: Annotated[
        list[str] | None,
        typer.Argument(help="on, off, bright [+|-|=|value], temp [...], status"),
    ] = None,
) -> None:
    """Toggle a specific light, or run a command against it."""
    run_command([identifier, *(args or [])])


def register(app: typer.Typer) -> None:
    app.command("list")(list_lights)
    app.command("status")(status)
    app.command(
        LIGHT_COMMAND,
        hidden=True,
        context_settings={"ignore_unknown_options": True},
    )(light)
