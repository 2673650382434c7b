from __future__ import annotations

import typer

from keylight.cli.common import run_command


def turn_on() -> None:
    """Turn on all lights."""
    run_command(["on"])


def turn_off() -> None:
    """Turn off all lights."""
    run_command(["off"])


def register(app: typer.Typer) -> None:
    app.command("on")(turn_on)
    app.command("off")(turn_off)
