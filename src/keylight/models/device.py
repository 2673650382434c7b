"""Device state and partial update models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from keylight.utils.units import (
    BRIGHTNESS_MAX,
    BRIGHTNESS_MIN,
    TEMPERATURE_MAX,
    TEMPERATURE_MIN,
    kelvin_to_wire,
    wire_to_kelvin,
)


class LightState(BaseModel):
    """Live state of one fixture (temperature in Kelvin)."""

    model_config = {"frozen": True}

    on: bool
    brightness: int
    temperature: int

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> LightState:
        """Build from one entry of the ``lights`` array in a device response."""
        return cls(
            on=bool(data["on"]),
            brightness=int(data["brightness"]),
            temperature=wire_to_kelvin(int(data["temperature"])),
        )


class LightPatch(BaseModel):
    """Partial update; only explicitly supplied fields are sent to the device."""

    model_config = {"frozen": True, "extra": "forbid"}

    on: bool | None = None
    brightness: int | None = Field(default=None, ge=BRIGHTNESS_MIN, le=BRIGHTNESS_MAX)
    temperature: int | None = Field(
        default=None, ge=TEMPERATURE_MIN, le=TEMPERATURE_MAX
    )

    @property
    def has_power(self) -> bool:
        return self.on is not None

    @property
    def has_brightness(self) -> bool:
        return self.brightness is not None

    @property
    def has_temperature(self) -> bool:
        return self.temperature is not None

    def to_api(self) -> dict[str, Any]:
        light: dict[str, Any] = {}
        if self.on is not None:
            light["on"] = 1 if self.on else 0
        if self.brightness is not None:
            light["brightness"] = self.brightness
        if self.temperature is not None:
            light["temperature"] = kelvin_to_wire(self.temperature)
        return {"lights": [light]}
