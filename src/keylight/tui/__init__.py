"""Interactive terminal session."""

from __future__ import annotations

import asyncio
import logging

from rich.console import Console
from rich.markup import escape

from keylight.config import Settings, data_dir_from_settings
from keylight.core import CommandRouter, ControlService, LightClient, discover_lights
from keylight.storage import RegistryHolder, StateStore

from .session import InteractiveSession

logger = logging.getLogger(__name__)

console = Console()


def _discover_at_startup(settings: Settings, registry: RegistryHolder) -> bool:
    console.print("No lights configured. Running discovery...")
    console.print("Please wait...")
    try:
        lights = asyncio.run(
            discover_lights(settings.discovery, settings.discovery.startup_timeout)
        )
    except OSError as exc:
        console.print(f"[red]✗ Error: Failed to discover: {escape(str(exc))}[/red]")
        return False
    if not lights:
        console.print("No lights found. Make sure they are powered on.")
        return False
    for name, address in lights.items():
        console.print(f"Found: {escape(name)} at {address}")
    registry.replace(lights)
    console.print(f"\n[green]✓ Discovered {len(lights)} light(s)[/green]\n")
    return True


async def _run_session(
    settings: Settings, store: StateStore, registry: RegistryHolder
) -> None:
    async with LightClient(settings.device, settings.retry) as client:
        router = CommandRouter(
            ControlService(client, store), registry, settings.discovery
        )
        router.restore_selection(store.state.last_selected_light)
        await InteractiveSession(router).run()
        store.save_selected_light(router.selected_light_name())


def run_tui(settings: Settings) -> int:
    """Run the interactive session; returns the process exit code."""
    store = StateStore(data_dir_from_settings(settings))
    registry = RegistryHolder(store)
    if not len(registry.current) and not _discover_at_startup(settings, registry):
        return 1
    logger.info("Starting interactive session with %d light(s)", len(registry.current))
    asyncio.run(_run_session(settings, store, registry))
    return 0


__all__ = ["InteractiveSession", "run_tui"]
