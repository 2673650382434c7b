from __future__ import annotations

from typing import Annotated

import typer

from keylight.cli.common import run_command

LEVEL_CONTEXT = {"ignore_unknown_options": True}


def bright(
    value: Annotated[
        str,
        typer.Argument(help="'+' or '-' to step by 5%, '=' to equalize, or 3-100"),
    ],
) -> None:
    """Adjust brightness of all lights."""
    run_command(["bright", value])


def temp(
    value: Annotated[
        str,
        typer.Argument(help="'+' or '-' to step by 200K, '=' to equalize, or 2900-7000"),
    ],
) -> None:
    """Adjust color temperature of all lights."""
    run_command(["temp", value])


def register(app: typer.Typer) -> None:
    app.command("bright", context_settings=LEVEL_CONTEXT)(bright)
    app.command("temp", context_settings=LEVEL_CONTEXT)(temp)
