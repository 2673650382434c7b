import pytest

from keylight.config import (
    DeviceConfig,
    Settings,
    get_settings,
    load_settings,
    resolve_config_path,
    write_settings,
)


def test_defaults_when_no_config_file():
    """Test built-in settings without a config file."""
    settings = get_settings()
    assert settings.device.port == 9123
    assert settings.discovery.service_type == "_elg._tcp.local."
    assert settings.retry.attempts == 3


def test_env_var_pointing_to_missing_file_fails(tmp_path, monkeypatch):
    """Test KEYLIGHT_CONFIG naming a missing file fails."""
    monkeypatch.setenv("KEYLIGHT_CONFIG", str(tmp_path / "missing.toml"))
    with pytest.raises(FileNotFoundError):
        resolve_config_path()


def test_written_settings_load_back(tmp_path):
    """Test written settings load back."""
    path = tmp_path / "config.toml"
    settings = Settings(device=DeviceConfig(read_timeout=1.5, parallel_requests=4))
    write_settings(settings, path)

    loaded = load_settings(path)

    assert loaded.device.read_timeout == 1.5
    assert loaded.device.parallel_requests == 4
    assert loaded.logging.file is None


def test_invalid_toml_is_a_value_error(tmp_path):
    """Test malformed TOML raises ValueError."""
    path = tmp_path / "config.toml"
    path.write_text("[device\nport = 1")
    with pytest.raises(ValueError, match="Invalid TOML"):
        load_settings(path)


def test_timeouts_above_five_seconds_rejected(tmp_path):
    """Test device timeouts are capped at five seconds."""
    path = tmp_path / "config.toml"
    path.write_text("[device]\nread_timeout = 9.0\n")
    with pytest.raises(ValueError, match="Invalid config file"):
        load_settings(path)


def test_unknown_keys_rejected(tmp_path):
    """Test unknown config keys are rejected."""
    path = tmp_path / "config.toml"
    path.write_text("[device]\ncolour = 'red'\n")
    with pytest.raises(ValueError):
        load_settings(path)
