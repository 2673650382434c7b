"""Value ranges and temperature unit conversion for Key Light devices."""

from __future__ import annotations

BRIGHTNESS_MIN = 3
BRIGHTNESS_MAX = 100
BRIGHTNESS_STEP = 5

TEMPERATURE_MIN = 2900
TEMPERATURE_MAX = 7000
TEMPERATURE_STEP = 200

DEFAULT_BRIGHTNESS = 50
DEFAULT_TEMPERATURE = 4000

# The device API reports temperature as an inverted micro-reciprocal value
# (roughly 143 at 7000K up to 345 at 2900K).
MIRED_SCALE = 1_000_000


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_brightness(value: int) -> int:
    return clamp(value, BRIGHTNESS_MIN, BRIGHTNESS_MAX)


def clamp_temperature(value: int) -> int:
    return clamp(value, TEMPERATURE_MIN, TEMPERATURE_MAX)


def kelvin_to_wire(kelvin: int) -> int:
    if kelvin <= 0:
        raise ValueError(f"Temperature must be positive, got {kelvin}")
    return round(MIRED_SCALE / kelvin)


def wire_to_kelvin(wire: int) -> int:
    if wire <= 0:
        raise ValueError(f"Wire temperature must be positive, got {wire}")
    return round(MIRED_SCALE / wire)


def brightness_in_range(value: int) -> bool:
    return BRIGHTNESS_MIN <= value <= BRIGHTNESS_MAX


def temperature_in_range(value: int) -> bool:
    return TEMPERATURE_MIN <= value <= TEMPERATURE_MAX
