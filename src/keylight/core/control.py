"""Fan a single logical command out across a set of devices."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from keylight.models import LightPatch, LightState
from keylight.storage import StateStore
from keylight.utils.retry import RetryExhausted
from keylight.utils.units import (
    BRIGHTNESS_MAX,
    BRIGHTNESS_MIN,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    brightness_in_range,
    clamp_brightness,
    clamp_temperature,
    temperature_in_range,
)

from .client import LightClient
from .errors import DeviceError, InvalidInput, NoTargets

logger = logging.getLogger(__name__)


class Action(str, Enum):
    TOGGLE = "toggle"
    TURN_ON = "on"
    TURN_OFF = "off"
    SET_BRIGHTNESS = "set_brightness"
    SET_TEMPERATURE = "set_temperature"
    ADJUST_BRIGHTNESS = "adjust_brightness"
    ADJUST_TEMPERATURE = "adjust_temperature"
    EQUALIZE_BRIGHTNESS = "equalize_brightness"
    EQUALIZE_TEMPERATURE = "equalize_temperature"


BRIGHTNESS_ACTIONS = {
    Action.SET_BRIGHTNESS,
    Action.ADJUST_BRIGHTNESS,
    Action.EQUALIZE_BRIGHTNESS,
}
TEMPERATURE_ACTIONS = {
    Action.SET_TEMPERATURE,
    Action.ADJUST_TEMPERATURE,
    Action.EQUALIZE_TEMPERATURE,
}


@dataclass(frozen=True)
class Command:
    """One logical command. ``value`` is the target for SET, the delta for ADJUST."""

    action: Action
    value: int | None = None
    fast: bool = False

    @property
    def is_value_command(self) -> bool:
        return self.action in (Action.SET_BRIGHTNESS, Action.SET_TEMPERATURE)

    @property
    def is_power_command(self) -> bool:
        return self.action in (Action.TOGGLE, Action.TURN_ON, Action.TURN_OFF)


@dataclass
class Summary:
    """Aggregated outcome of a command; independent of completion order."""

    command: Command
    succeeded: int = 0
    failed: int = 0
    errors: dict[str, str] = field(default_factory=dict)
    # Value reached per address: power as 0/1, brightness in %, temperature in K
    applied: dict[str, int] = field(default_factory=dict)
    defaults_saved: bool = False

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.succeeded > 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


Outcome = int | Exception


class ControlService:
    def __init__(self, client: LightClient, store: StateStore | None = None) -> None:
        self.client = client
        self.store = store

    async def apply(self, command: Command, addresses: Sequence[str]) -> Summary:
        """Run ``command`` against every address concurrently.

        Raises:
            InvalidInput: For an explicit value outside its range.
            NoTargets: If ``addresses`` is empty, or an equalize could not
                read any device. No writes are attempted in either case.
        """
        targets = list(dict.fromkeys(addresses))
        if not targets:
            raise NoTargets("No lights selected")
        _check_value(command)

        if command.action in (Action.EQUALIZE_BRIGHTNESS, Action.EQUALIZE_TEMPERATURE):
            outcomes = await self._equalize(command, targets)
        else:
            step = self._step_for(command)
            outcomes = await self._fan_out(targets, step)

        summary = Summary(command=command)
        for address in targets:
            outcome = outcomes[address]
            if isinstance(outcome, Exception):
                summary.failed += 1
                summary.errors[address] = str(outcome)
                logger.info("%s failed on %s: %s", command.action.value, address, outcome)
            else:
                summary.succeeded += 1
                summary.applied[address] = outcome

        if command.is_value_command and summary.ok:
            summary.defaults_saved = self._save_default(command)
        return summary

    async def read_states(
        self, addresses: Sequence[str]
    ) -> dict[str, LightState | DeviceError]:
        return await self.client.read_many(list(dict.fromkeys(addresses)))

    def _step_for(self, command: Command) -> Callable[[str], Awaitable[int]]:
        client = self.client
        action = command.action
        value = command.value or 0

        async def toggle(address: str) -> int:
            if command.fast:
                return int(await client.toggle_fast(address))
            return int(await client.toggle_slow(address))

        async def power(address: str) -> int:
            on = action is Action.TURN_ON
            await client.write(address, LightPatch(on=on))
            return int(on)

        async def set_brightness(address: str) -> int:
            await client.write(address, LightPatch(brightness=value))
            return value

        async def set_temperature(address: str) -> int:
            await client.write(address, LightPatch(temperature=value))
            return value

        async def adjust_brightness(address: str) -> int:
            state = await client.read(address)
            target = clamp_brightness(state.brightness + value)
            await client.write(address, LightPatch(brightness=target))
            return target

        async def adjust_temperature(address: str) -> int:
            state = await client.read(address)
            target = clamp_temperature(state.temperature + value)
            await client.write(address, LightPatch(temperature=target))
            return target

        steps: dict[Action, Callable[[str], Awaitable[int]]] = {
            Action.TOGGLE: toggle,
            Action.TURN_ON: power,
            Action.TURN_OFF: power,
            Action.SET_BRIGHTNESS: set_brightness,
            Action.SET_TEMPERATURE: set_temperature,
            Action.ADJUST_BRIGHTNESS: adjust_brightness,
            Action.ADJUST_TEMPERATURE: adjust_temperature,
        }
        return steps[action]

    async def _equalize(
        self, command: Command, targets: list[str]
    ) -> dict[str, Outcome]:
        states = await self.client.read_many(targets)
        brightness = command.action is Action.EQUALIZE_BRIGHTNESS
        readings = [
            state.brightness if brightness else state.temperature
            for state in states.values()
            if isinstance(state, LightState)
        ]
        if not readings:
            raise NoTargets("Could not read any lights")

        mean = sum(readings) // len(readings)
        if brightness:
            level = clamp_brightness(mean)
            set_command = Command(Action.SET_BRIGHTNESS, level)
        else:
            level = clamp_temperature(mean)
            set_command = Command(Action.SET_TEMPERATURE, level)
        logger.debug(
            "Equalizing %d lights to %d (%d readable)",
            len(targets),
            level,
            len(readings),
        )
        return await self._fan_out(targets, self._step_for(set_command))

    async def _fan_out(
        self, targets: list[str], step: Callable[[str], Awaitable[int]]
    ) -> dict[str, Outcome]:
        semaphore = asyncio.Semaphore(self.client.config.parallel_requests)

        async def _run(address: str) -> Outcome:
            async with semaphore:
                try:
                    return await step(address)
                except (DeviceError, RetryExhausted) as exc:
                    return exc

        results = await asyncio.gather(*(_run(address) for address in targets))
        return dict(zip(targets, results))

    def _save_default(self, command: Command) -> bool:
        if self.store is None:
            return False
        try:
            if command.action is Action.SET_BRIGHTNESS:
                self.store.save_defaults(brightness=command.value)
            else:
                self.store.save_defaults(temperature=command.value)
        except OSError as exc:
            logger.warning(
                "Could not save default for %s: %s", command.action.value, exc
            )
            return False
        return True


def _check_value(command: Command) -> None:
    value = command.value
    if command.action is Action.SET_BRIGHTNESS:
        if value is None or not brightness_in_range(value):
            raise InvalidInput(
                f"Brightness must be between {BRIGHTNESS_MIN} and {BRIGHTNESS_MAX}"
            )
    elif command.action is Action.SET_TEMPERATURE:
        if value is None or not temperature_in_range(value):
            raise InvalidInput(
                f"Temperature must be between {TEMPERATURE_MIN}K and {TEMPERATURE_MAX}K"
            )
    elif command.action in (Action.ADJUST_BRIGHTNESS, Action.ADJUST_TEMPERATURE):
        if value is None:
            raise InvalidInput("Adjustment requires a delta")
