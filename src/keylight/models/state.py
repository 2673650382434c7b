"""Persisted state document."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from keylight.utils.units import (
    DEFAULT_BRIGHTNESS,
    DEFAULT_TEMPERATURE,
    clamp_brightness,
    clamp_temperature,
)


class PersistedState(BaseModel):
    """Registry plus the last values applied, stored as JSON.

    Field aliases match the on-disk keys (``lastBrightness`` etc.).
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    lights: dict[str, str] = Field(default_factory=dict)
    last_brightness: int = Field(default=DEFAULT_BRIGHTNESS, alias="lastBrightness")
    last_temperature: int = Field(
        default=DEFAULT_TEMPERATURE, alias="lastTemperature"
    )
    last_selected_light: str = Field(default="", alias="lastSelectedLight")

    @field_validator("lights", mode="before")
    @classmethod
    def _lights_or_empty(cls, value: Any) -> Any:
        return value or {}

    @field_validator("last_brightness", mode="before")
    @classmethod
    def _brightness_default(cls, value: Any) -> Any:
        try:
            return clamp_brightness(int(value)) if value else DEFAULT_BRIGHTNESS
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_BRIGHTNESS

    @field_validator("last_temperature", mode="before")
    @classmethod
    def _temperature_default(cls, value: Any) -> Any:
        try:
            return clamp_temperature(int(value)) if value else DEFAULT_TEMPERATURE
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_TEMPERATURE

    @field_validator("last_selected_light", mode="before")
    @classmethod
    def _selected_or_empty(cls, value: Any) -> Any:
        return value or ""

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
