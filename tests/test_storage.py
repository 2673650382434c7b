import json

import pytest

from keylight.storage import RegistryHolder, StateStore


def test_missing_state_file_gives_defaults(store):
    """Test a missing state file gives defaults."""
    state = store.load()
    assert state.lights == {}
    assert state.last_brightness == 50


def test_corrupt_state_file_gives_defaults(store):
    """Test malformed JSON gives defaults."""
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json")
    assert store.load().last_temperature == 4000


def test_undecodable_state_file_gives_defaults(store):
    """Bytes that are not UTF-8 fall back to defaults instead of raising."""
    store.path.parent.mkdir(parents=True)
    store.path.write_bytes(b'{"lights": {"\xff\xfe": "10.0.0.2"}}')
    state = store.load()
    assert state.lights == {}
    assert state.last_brightness == 50


@pytest.mark.parametrize("value", [[1], {"level": 1}, "bright", 1e400])
def test_non_numeric_stored_values_use_defaults(store, value):
    """Stored defaults that are not numbers fall back to the built-in ones."""
    store.path.parent.mkdir(parents=True)
    store.path.write_text(
        json.dumps(
            {
                "lights": {"desk": "10.0.0.2"},
                "lastBrightness": value,
                "lastTemperature": value,
            }
        )
    )
    state = store.load()
    assert state.lights == {"desk": "10.0.0.2"}
    assert state.last_brightness == 50
    assert state.last_temperature == 4000


def test_invalid_state_document_gives_defaults(store):
    """Test a wrongly shaped document gives defaults."""
    store.path.parent.mkdir(parents=True)
    store.path.write_text(json.dumps({"lights": ["not", "a", "map"]}))
    assert store.load().lights == {}


def test_save_writes_disk_keys_and_leaves_no_temp_files(store):
    """Test saves write the full document atomically."""
    store.save_lights({"desk": "10.0.0.2"})
    store.save_defaults(brightness=35)
    store.save_selected_light("desk")

    data = json.loads(store.path.read_text())
    assert data == {
        "lights": {"desk": "10.0.0.2"},
        "lastBrightness": 35,
        "lastTemperature": 4000,
        "lastSelectedLight": "desk",
    }
    assert [p.name for p in store.path.parent.iterdir()] == ["state.json"]


def test_saved_state_is_visible_to_a_new_store(store):
    """Test saved state is read by a fresh store."""
    store.save_defaults(temperature=5200)
    assert StateStore(store.path.parent).state.last_temperature == 5200


def test_registry_replace_persists_and_bumps_version(store):
    """Test replacing the registry saves it first."""
    holder = RegistryHolder(store)
    before = holder.current

    holder.replace({"shelf": "10.0.0.4", "desk": "10.0.0.2"})

    assert holder.current.version == before.version + 1
    assert holder.current.names == ["shelf", "desk"]
    assert StateStore(store.path.parent).state.lights == {
        "shelf": "10.0.0.4",
        "desk": "10.0.0.2",
    }


def test_registry_replace_keeps_old_snapshot_when_save_fails(store, monkeypatch):
    """Test a failed save keeps the old snapshot."""
    store.save_lights({"desk": "10.0.0.2"})
    holder = RegistryHolder(store)

    def _fail(_lights):
        raise OSError("disk full")

    monkeypatch.setattr(store, "save_lights", _fail)
    with pytest.raises(OSError):
        holder.replace({"shelf": "10.0.0.4"})

    assert holder.current.names == ["desk"]
