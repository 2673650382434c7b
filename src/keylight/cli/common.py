from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from keylight.config import (
    Settings,
    data_dir_from_settings,
    get_settings,
    resolve_config_path,
)
from keylight.core import (
    Action,
    CommandRouter,
    ControlService,
    DeviceError,
    InvalidInput,
    LightClient,
    NoTargets,
    Request,
    Summary,
    parse,
)
from keylight.core.control import BRIGHTNESS_ACTIONS, TEMPERATURE_ACTIONS
from keylight.models import DeviceRegistry, LightState
from keylight.storage import RegistryHolder, StateStore

logger = logging.getLogger(__name__)


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


@dataclass
class Runtime:
    settings: Settings
    store: StateStore
    registry: RegistryHolder

    def client(self) -> LightClient:
        return LightClient(self.settings.device, self.settings.retry)

    def router(self, client: LightClient) -> CommandRouter:
        return CommandRouter(
            ControlService(client, self.store),
            self.registry,
            self.settings.discovery,
        )


def build_runtime(settings: Settings, data_dir: Path | None = None) -> Runtime:
    store = StateStore(data_dir or data_dir_from_settings(settings))
    return Runtime(settings=settings, store=store, registry=RegistryHolder(store))


def load_runtime_or_exit(require_lights: bool = True) -> Runtime:
    runtime = build_runtime(load_settings_or_exit())
    if require_lights and not len(runtime.registry.current):
        typer.echo("No lights configured. Please run: keylight detect", err=True)
        raise typer.Exit(1)
    return runtime


async def _dispatch(
    runtime: Runtime, request: Request
) -> Summary | dict[str, LightState | DeviceError]:
    async with runtime.client() as client:
        router = runtime.router(client)
        if request.is_status:
            return await router.read_status(request)
        return await router.execute(request)


def run_command(args: list[str]) -> None:
    """Parse and run a one-shot command; exits non-zero on failure."""
    runtime = load_runtime_or_exit()
    registry = runtime.registry.current
    try:
        request = parse(args, registry)
    except InvalidInput as exc:
        typer.echo(f"✗ {exc}", err=True)
        raise typer.Exit(1) from exc

    console = Console()
    logger.info("Running %s", args)
    try:
        result = asyncio.run(_dispatch(runtime, request))
    except NoTargets as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1) from exc

    if isinstance(result, Summary):
        print_summary(console, request, result, registry)
        failed = not result.ok if request.target else result.succeeded == 0
        logger.info(
            "%s: %d succeeded, %d failed", args, result.succeeded, result.failed
        )
    else:
        print_status(console, request, result, registry)
        failed = request.target is not None and any(
            isinstance(state, DeviceError) for state in result.values()
        )
    if failed:
        raise typer.Exit(1)


def _describe(action: Action, value: int) -> str:
    if action in BRIGHTNESS_ACTIONS:
        return f"brightness: {value}%"
    if action in TEMPERATURE_ACTIONS:
        return f"temperature: {value}K"
    return "on" if value else "off"


def print_summary(
    console: Console, request: Request, summary: Summary, registry: DeviceRegistry
) -> None:
    command = summary.command
    action = command.action
    if action in (Action.EQUALIZE_BRIGHTNESS, Action.EQUALIZE_TEMPERATURE):
        level = next(iter(summary.applied.values()), None)
        if level is not None:
            unit = "%" if action is Action.EQUALIZE_BRIGHTNESS else "K"
            console.print(f"Setting all lights to {level}{unit}")

    for address in request.addresses(registry):
        name = escape(registry.name_for(address))
        error = summary.errors.get(address)
        if action is Action.TOGGLE:
            if error:
                console.print(f"[red]✗[/red] Failed to toggle {name}: {escape(error)}")
            else:
                console.print(f"[green]✓[/green] Toggled {name}")
        elif action in (Action.TURN_ON, Action.TURN_OFF):
            if error:
                console.print(f"[red]✗[/red] Failed to turn {action.value} {name}")
            else:
                console.print(f"[green]✓[/green] Turned {action.value} {name}")
        elif error:
            console.print(f"[red]✗[/red] Failed to adjust {name}: {escape(error)}")
        else:
            value = summary.applied[address]
            console.print(f"[green]✓[/green] {name} {_describe(action, value)}")

    if summary.defaults_saved:
        logger.debug("Saved new default for %s", action.value)


def format_state(state: LightState) -> str:
    power = "On" if state.on else "Off"
    return (
        f"{power} | Brightness: {state.brightness}% | "
        f"Temperature: {state.temperature}K"
    )


def print_status(
    console: Console,
    request: Request,
    states: dict[str, LightState | DeviceError],
    registry: DeviceRegistry,
) -> None:
    if request.target is not None:
        name, address = request.target
        name = escape(name)
        state = states[address]
        if isinstance(state, LightState):
            console.print(f"{name}: {format_state(state)}")
        else:
            console.print(f"[red]✗[/red] {name}: Offline")
        return

    console.print("Light status:")
    for name, address in registry.lights.items():
        state = states[address]
        name = escape(name)
        if isinstance(state, LightState):
            console.print(f"  {name}: {format_state(state)}")
        else:
            console.print(f"  {name}: [dim]Offline[/dim]")
