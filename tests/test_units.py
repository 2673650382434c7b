import pytest

from keylight.utils.units import (
    clamp_brightness,
    clamp_temperature,
    kelvin_to_wire,
    temperature_in_range,
    wire_to_kelvin,
)


def test_kelvin_to_wire_uses_reciprocal_scale():
    """Test Kelvin to wire conversion."""
    assert kelvin_to_wire(4000) == 250
    assert kelvin_to_wire(2900) == 345
    assert kelvin_to_wire(7000) == 143


def test_wire_to_kelvin_rounds_to_nearest():
    """Test wire to Kelvin conversion rounds."""
    assert wire_to_kelvin(250) == 4000
    assert wire_to_kelvin(143) == 6993


@pytest.mark.parametrize("value", [0, -1])
def test_conversions_reject_non_positive(value):
    """Test conversions reject zero and negatives."""
    with pytest.raises(ValueError):
        kelvin_to_wire(value)
    with pytest.raises(ValueError):
        wire_to_kelvin(value)


def test_clamps():
    """Test brightness and temperature clamping."""
    assert clamp_brightness(0) == 3
    assert clamp_brightness(105) == 100
    assert clamp_brightness(42) == 42
    assert clamp_temperature(2000) == 2900
    assert clamp_temperature(9000) == 7000


def test_temperature_range_is_inclusive():
    """Test the temperature range includes both ends."""
    assert temperature_in_range(2900)
    assert temperature_in_range(7000)
    assert not temperature_in_range(7001)
