"""Focus and pending-value state for the interactive controls."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from keylight.utils.units import (
    BRIGHTNESS_STEP,
    DEFAULT_BRIGHTNESS,
    DEFAULT_TEMPERATURE,
    TEMPERATURE_STEP,
    clamp_brightness,
    clamp_temperature,
)

from .control import Action, Command, ControlService, Summary


class Focus(Enum):
    TOGGLE = "toggle"
    TURN_OFF = "turn_off"
    TURN_ON = "turn_on"
    BRIGHTNESS = "brightness"
    TEMPERATURE = "temperature"


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


BUTTON_ROW = (Focus.TOGGLE, Focus.TURN_OFF, Focus.TURN_ON)


class FocusStateMachine:
    """Tracks the focused control and the pending brightness/temperature.

    Left/right moves along the button row but adjusts the pending value on
    the brightness and temperature rows. Pending values are local until
    committed and are independent of any device's live state.
    """

    def __init__(
        self,
        brightness: int = DEFAULT_BRIGHTNESS,
        temperature: int = DEFAULT_TEMPERATURE,
    ) -> None:
        self.focus = Focus.TOGGLE
        self.brightness = clamp_brightness(brightness)
        self.temperature = clamp_temperature(temperature)

    @property
    def on_button_row(self) -> bool:
        return self.focus in BUTTON_ROW

    def move(self, direction: Direction) -> Focus:
        if direction is Direction.UP:
            if self.focus is Focus.BRIGHTNESS:
                self.focus = Focus.TOGGLE
            elif self.focus is Focus.TEMPERATURE:
                self.focus = Focus.BRIGHTNESS
        elif direction is Direction.DOWN:
            if self.on_button_row:
                self.focus = Focus.BRIGHTNESS
            elif self.focus is Focus.BRIGHTNESS:
                self.focus = Focus.TEMPERATURE
        else:
            delta = 1 if direction is Direction.RIGHT else -1
            if self.on_button_row:
                index = BUTTON_ROW.index(self.focus) + delta
                self.focus = BUTTON_ROW[max(0, min(len(BUTTON_ROW) - 1, index))]
            elif self.focus is Focus.BRIGHTNESS:
                self.brightness = clamp_brightness(
                    self.brightness + delta * BRIGHTNESS_STEP
                )
            else:
                self.temperature = clamp_temperature(
                    self.temperature + delta * TEMPERATURE_STEP
                )
        return self.focus

    def command(self) -> Command:
        """The command the focused control issues when activated."""
        if self.focus is Focus.TOGGLE:
            return Command(Action.TOGGLE)
        if self.focus is Focus.TURN_OFF:
            return Command(Action.TURN_OFF)
        if self.focus is Focus.TURN_ON:
            return Command(Action.TURN_ON)
        if self.focus is Focus.BRIGHTNESS:
            return Command(Action.SET_BRIGHTNESS, self.brightness)
        return Command(Action.SET_TEMPERATURE, self.temperature)

    async def commit(self, service: ControlService, addresses: Sequence[str]) -> Summary:
        """Apply the focused control; toggling confirms each light's state first."""
        return await service.apply(self.command(), addresses)
