import pytest
from pydantic import ValidationError

from keylight.models import DeviceRegistry, LightPatch, LightState, PersistedState


def test_light_state_from_api_converts_temperature():
    """Test device JSON converts to a Kelvin state."""
    state = LightState.from_api({"on": 1, "brightness": 40, "temperature": 250})
    assert state == LightState(on=True, brightness=40, temperature=4000)


def test_patch_sends_only_supplied_fields():
    """Test patches carry only the fields given."""
    assert LightPatch(on=False).to_api() == {"lights": [{"on": 0}]}
    assert LightPatch(brightness=30, temperature=5000).to_api() == {
        "lights": [{"brightness": 30, "temperature": 200}]
    }


def test_patch_rejects_out_of_range_values():
    """Test patch values are range checked."""
    with pytest.raises(ValidationError):
        LightPatch(brightness=2)
    with pytest.raises(ValidationError):
        LightPatch(temperature=7200)


def test_patch_presence_flags():
    """Test patch field presence flags."""
    patch = LightPatch(temperature=3000)
    assert patch.has_temperature
    assert not patch.has_power
    assert not patch.has_brightness


def test_registry_find_prefers_exact_name_over_ordinal():
    """Test lookup tries the name before the ordinal."""
    registry = DeviceRegistry(
        lights={"desk": "10.0.0.2", "2": "10.0.0.3", "shelf": "10.0.0.4"}
    )
    assert registry.find("2") == ("2", "10.0.0.3")
    assert registry.find("3") == ("shelf", "10.0.0.4")
    assert registry.find("4") is None
    assert registry.find("missing") is None


def test_registry_replaced_bumps_version():
    """Test a replaced registry is a new snapshot."""
    registry = DeviceRegistry(lights={"desk": "10.0.0.2"})
    replaced = registry.replaced({"shelf": "10.0.0.4"})
    assert replaced.version == registry.version + 1
    assert replaced.names == ["shelf"]
    assert registry.names == ["desk"]


def test_persisted_state_defaults_for_zero_values():
    """Test zero and null stored values fall back to defaults."""
    state = PersistedState.model_validate(
        {"lights": None, "lastBrightness": 0, "lastTemperature": 0}
    )
    assert state.lights == {}
    assert state.last_brightness == 50
    assert state.last_temperature == 4000
    assert state.last_selected_light == ""


def test_persisted_state_clamps_stored_values():
    """Test stored values outside range are clamped."""
    state = PersistedState.model_validate(
        {"lastBrightness": 150, "lastTemperature": 1000}
    )
    assert state.last_brightness == 100
    assert state.last_temperature == 2900


def test_persisted_state_dumps_with_disk_keys():
    """Test the state document uses its on-disk key names."""
    data = PersistedState(last_selected_light="desk").to_json_dict()
    assert set(data) == {
        "lights",
        "lastBrightness",
        "lastTemperature",
        "lastSelectedLight",
    }
    assert data["lastSelectedLight"] == "desk"
