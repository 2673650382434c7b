from __future__ import annotations

import asyncio
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from keylight.cli.common import load_runtime_or_exit
from keylight.core import discover_lights

logger = logging.getLogger(__name__)


def detect(
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", help="Seconds to browse (default from config)"),
    ] = None,
) -> None:
    """Discover lights on the network and replace the configured set."""
    console = Console()
    runtime = load_runtime_or_exit(require_lights=False)
    discovery = runtime.settings.discovery

    console.print("Discovering lights...")
    logger.info(
        "mDNS discovery settings: service=%s, timeout=%.2fs",
        discovery.service_type,
        timeout or discovery.timeout,
    )
    try:
        lights = asyncio.run(discover_lights(discovery, timeout))
    except OSError as exc:
        console.print(f"[red]✗[/red] Error: Failed to discover: {escape(str(exc))}")
        raise typer.Exit(1) from exc

    if not lights:
        console.print("[red]✗[/red] No lights found")
        return

    for name, address in lights.items():
        console.print(f"Found: {escape(name)} at {address}")

    runtime.registry.replace(lights)
    console.print(f"\n[green]✓[/green] Discovered {len(lights)} light(s)")


def register(app: typer.Typer) -> None:
    app.command()(detect)
