"""Map one-shot text commands and interactive keys onto control operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from keylight.config import DiscoveryConfig
from keylight.models import DeviceRegistry, LightState
from keylight.storage import RegistryHolder
from keylight.utils.units import (
    BRIGHTNESS_MAX,
    BRIGHTNESS_MIN,
    BRIGHTNESS_STEP,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    TEMPERATURE_STEP,
    brightness_in_range,
    temperature_in_range,
)

from .control import Action, Command, ControlService, Summary
from .discovery import discover_lights
from .errors import DeviceError, InvalidInput, NoTargets
from .focus import Direction, FocusStateMachine
from .selection import ALL, Selection, by_ordinal

logger = logging.getLogger(__name__)

LIGHT_COMMANDS = ("on", "off", "bright", "temp", "status")
MAX_ORDINAL_KEYS = 9

NAVIGATION_KEYS = {
    "up": Direction.UP,
    "k": Direction.UP,
    "down": Direction.DOWN,
    "j": Direction.DOWN,
    "left": Direction.LEFT,
    "h": Direction.LEFT,
    "right": Direction.RIGHT,
    "l": Direction.RIGHT,
}
ACTIVATE_KEYS = ("enter", "space", " ")
QUIT_KEYS = ("q", "c-c")

Discover = Callable[[DiscoveryConfig], Awaitable[dict[str, str]]]


@dataclass(frozen=True)
class Request:
    """A parsed one-shot command. ``command`` is None for a status query."""

    command: Command | None
    target: tuple[str, str] | None = None

    @property
    def is_status(self) -> bool:
        return self.command is None

    def addresses(self, registry: DeviceRegistry) -> list[str]:
        if self.target is not None:
            return [self.target[1]]
        return registry.addresses


def parse_level(kind: str, token: str) -> Command:
    """Parse the argument of ``bright``/``temp``: ``+``, ``-``, ``=`` or a number."""
    brightness = kind == "bright"
    if token == "+":
        step = BRIGHTNESS_STEP if brightness else TEMPERATURE_STEP
        action = Action.ADJUST_BRIGHTNESS if brightness else Action.ADJUST_TEMPERATURE
        return Command(action, step)
    if token == "-":
        step = BRIGHTNESS_STEP if brightness else TEMPERATURE_STEP
        action = Action.ADJUST_BRIGHTNESS if brightness else Action.ADJUST_TEMPERATURE
        return Command(action, -step)
    if token == "=":
        return Command(
            Action.EQUALIZE_BRIGHTNESS if brightness else Action.EQUALIZE_TEMPERATURE
        )

    label = "brightness" if brightness else "temperature"
    try:
        value = int(token)
    except ValueError:
        raise InvalidInput(f"Invalid {label} value: {token}") from None

    if brightness and not brightness_in_range(value):
        raise InvalidInput(
            f"Brightness must be between {BRIGHTNESS_MIN} and {BRIGHTNESS_MAX}"
        )
    if not brightness and not temperature_in_range(value):
        raise InvalidInput(
            f"Temperature must be between {TEMPERATURE_MIN}K and {TEMPERATURE_MAX}K"
        )
    return Command(Action.SET_BRIGHTNESS if brightness else Action.SET_TEMPERATURE, value)


def _parse_action(args: Sequence[str], target: str) -> Request | Command:
    verb = args[0]
    if verb in ("on", "off"):
        if len(args) > 1:
            raise InvalidInput(f"Unexpected argument: {args[1]}")
        return Command(Action.TURN_ON if verb == "on" else Action.TURN_OFF)
    if verb in ("bright", "temp"):
        if len(args) < 2:
            raise InvalidInput(f"Usage: keylight {target}{verb} [+|-|=|value]")
        if len(args) > 2:
            raise InvalidInput(f"Unexpected argument: {args[2]}")
        return parse_level(verb, args[1])
    if verb == "status":
        if len(args) > 1:
            raise InvalidInput(f"Unexpected argument: {args[1]}")
        return Request(command=None)
    raise InvalidInput(
        f"Unknown command: {verb}\nAvailable commands: {', '.join(LIGHT_COMMANDS)}"
    )


def parse(args: Sequence[str], registry: DeviceRegistry) -> Request:
    """Turn a one-shot command line into a request without touching the network.

    Raises:
        InvalidInput: For unknown devices or commands, and malformed or
            out-of-range values.
    """
    if not args:
        raise InvalidInput("No command given")

    head = args[0]
    if head in LIGHT_COMMANDS:
        parsed = _parse_action(args, "")
        if isinstance(parsed, Request):
            return parsed
        return Request(command=parsed)

    found = registry.find(head)
    if found is None:
        raise InvalidInput(
            f"Light '{head}' not found. Use 'keylight list' to see available lights."
        )
    if len(args) == 1:
        return Request(command=Command(Action.TOGGLE, fast=True), target=found)

    parsed = _parse_action(args[1:], "<light> ")
    if isinstance(parsed, Request):
        return Request(command=None, target=found)
    return Request(command=parsed, target=found)


class CommandRouter:
    """Entry point shared by the one-shot CLI and the interactive session.

    Interactive keys update the selection and focus locally or run the
    focused command against the selected lights; the outcome is left in
    ``message``. Keys are processed one at a time.
    """

    def __init__(
        self,
        service: ControlService,
        registry: RegistryHolder,
        discovery: DiscoveryConfig | None = None,
        discover: Discover = discover_lights,
    ) -> None:
        self.service = service
        self.registry = registry
        self.discovery = discovery or DiscoveryConfig()
        self._discover = discover
        self.selection = Selection()
        store = service.store
        if store is not None:
            self.focus = FocusStateMachine(
                store.state.last_brightness, store.state.last_temperature
            )
        else:
            self.focus = FocusStateMachine()
        self.message = ""
        self.quitting = False
        self.states: dict[str, LightState | DeviceError] = {}
        self.on_update: Callable[[], None] | None = None
        self._lock = asyncio.Lock()
        self._discovery_task: asyncio.Task[None] | None = None

    # One-shot commands

    def parse(self, args: Sequence[str]) -> Request:
        return parse(args, self.registry.current)

    async def execute(self, request: Request) -> Summary:
        if request.command is None:
            raise ValueError("status requests are read with read_status()")
        addresses = request.addresses(self.registry.current)
        return await self.service.apply(request.command, addresses)

    async def read_status(
        self, request: Request
    ) -> dict[str, LightState | DeviceError]:
        return await self.service.read_states(request.addresses(self.registry.current))

    # Interactive session

    def restore_selection(self, name: str) -> None:
        registry = self.registry.current
        if name and name in registry.lights:
            self.selection.select(by_ordinal(registry.names.index(name) + 1), registry)

    def selected_light_name(self) -> str:
        return self.selection.selected_name(self.registry.current) or ""

    async def handle_key(self, key: str) -> bool:
        """Process one key press; returns False for keys with no binding."""
        async with self._lock:
            handled = await self._handle_key(key)
        if handled:
            self._notify()
        return handled

    async def _handle_key(self, key: str) -> bool:
        registry = self.registry.current
        if key == "a":
            self.selection.select(ALL)
            self.message = "✓ Controlling all lights"
        elif key.isdigit() and 1 <= int(key) <= MAX_ORDINAL_KEYS:
            if self.selection.select(by_ordinal(int(key)), registry):
                self.message = f"✓ Controlling {self.selected_light_name()}"
        elif key in QUIT_KEYS:
            self.quitting = True
        elif key == "d":
            self.start_discovery()
        elif key in NAVIGATION_KEYS:
            self.focus.move(NAVIGATION_KEYS[key])
        elif key in ACTIVATE_KEYS:
            await self.activate()
        else:
            return False
        return True

    async def activate(self) -> Summary | None:
        addresses = self.selection.resolve_addresses(self.registry.current)
        try:
            summary = await self.focus.commit(self.service, addresses)
        except NoTargets as exc:
            self.message = f"⚠ {exc}"
            return None
        self.message = describe_summary(summary)
        await self.refresh()
        return summary

    async def refresh(self) -> None:
        registry = self.registry.current
        self.states = await self.service.read_states(registry.addresses)

    def start_discovery(self) -> asyncio.Task[None] | None:
        """Run discovery detached from the input loop; one at a time."""
        if self._discovery_task is not None and not self._discovery_task.done():
            return None
        self.message = "Discovering lights..."
        self._discovery_task = asyncio.create_task(self._run_discovery())
        return self._discovery_task

    async def _run_discovery(self) -> None:
        try:
            lights = await self._discover(self.discovery)
        except OSError as exc:
            logger.warning("Discovery failed: %s", exc)
            self.message = "✗ Error: Failed to discover"
        else:
            if lights:
                await self._adopt(lights)
            else:
                self.message = "⚠ No lights found"
        self._notify()

    async def _adopt(self, lights: dict[str, str]) -> None:
        async with self._lock:
            try:
                self.registry.replace(lights)
            except OSError as exc:
                logger.warning("Could not save discovered lights: %s", exc)
                self.message = "✗ Error: Failed to save discovered lights"
                return
            await self.refresh()
        self.message = f"✓ Discovered {len(lights)} light(s)"

    async def close(self) -> None:
        """Stop a discovery still running when the session ends."""
        task = self._discovery_task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.debug("Discovery cancelled at shutdown")

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update()


def describe_summary(summary: Summary) -> str:
    command = summary.command
    action = command.action
    if summary.ok:
        if action is Action.TOGGLE:
            return f"✓ {summary.succeeded} light(s) toggled"
        if action is Action.TURN_ON:
            return "✓ Lights turned on"
        if action is Action.TURN_OFF:
            return "✓ Lights turned off"
        if action is Action.SET_BRIGHTNESS:
            return f"✓ Brightness set to {command.value}%"
        if action is Action.SET_TEMPERATURE:
            return f"✓ Temperature set to {command.value}K"
        return f"✓ {summary.succeeded} light(s) updated"

    failed = f"{summary.failed} of {summary.total} light(s)"
    if action is Action.TOGGLE:
        return f"✗ Error toggling {failed}"
    if action in (Action.TURN_ON, Action.TURN_OFF):
        return f"✗ Failed to turn {action.value} {failed}"
    if action is Action.SET_BRIGHTNESS:
        return f"✗ Error setting brightness on {failed}"
    if action is Action.SET_TEMPERATURE:
        return f"✗ Error setting temperature on {failed}"
    return f"✗ Error updating {failed}"
