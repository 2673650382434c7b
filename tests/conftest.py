from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from keylight.config import (
    DatabaseConfig,
    RetryConfig,
    Settings,
    get_settings,
    write_settings,
)
from keylight.core import LightClient
from keylight.storage import StateStore


@pytest.fixture(autouse=True)
def _isolate_settings_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv("KEYLIGHT_CONFIG", raising=False)
    monkeypatch.delenv("LOGLEVEL", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeLights:
    """In-memory Key Light devices behind an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.lights: dict[str, dict[str, int]] = {}
        self.offline: set[str] = set()
        self.unreadable: set[str] = set()
        self.rejecting: set[str] = set()
        self.failures: dict[str, int] = {}
        self.puts: list[tuple[str, dict]] = []

    def add(
        self, address: str, on: bool = False, brightness: int = 50, wire: int = 250
    ) -> None:
        self.lights[address] = {
            "on": int(on),
            "brightness": brightness,
            "temperature": wire,
        }

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host in self.offline:
            raise httpx.ConnectError("unreachable", request=request)
        if self.failures.get(host, 0) > 0:
            self.failures[host] -= 1
            raise httpx.ReadTimeout("timed out", request=request)

        if request.method == "PUT":
            payload = json.loads(request.content)
            self.puts.append((host, payload))
            if host in self.rejecting:
                return httpx.Response(400)
            self.lights.setdefault(host, {}).update(payload["lights"][0])
            return httpx.Response(200, json={"numberOfLights": 1, **payload})

        if host in self.unreadable:
            return httpx.Response(500)
        return httpx.Response(
            200, json={"numberOfLights": 1, "lights": [self.lights[host]]}
        )

    def written(self, address: str) -> list[dict]:
        return [payload["lights"][0] for host, payload in self.puts if host == address]


@pytest.fixture
def fake_lights() -> FakeLights:
    return FakeLights()


@pytest.fixture
def make_client(fake_lights: FakeLights):
    def _make(attempts: int = 3) -> LightClient:
        return LightClient(
            retry=RetryConfig(attempts=attempts, delay=0),
            transport=httpx.MockTransport(fake_lights),
        )

    return _make


@pytest.fixture
def store(tmp_path: Path) -> StateStore:
    return StateStore(tmp_path / "data")


@pytest.fixture
def configured(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the CLI at a temporary config and data directory."""

    def _configure(lights: dict[str, str] | None = None) -> StateStore:
        data_dir = tmp_path / "data"
        config_path = tmp_path / "config.toml"
        write_settings(
            Settings(database=DatabaseConfig(path=str(data_dir))), config_path
        )
        monkeypatch.setenv("KEYLIGHT_CONFIG", str(config_path))
        get_settings.cache_clear()
        state_store = StateStore(data_dir)
        if lights:
            state_store.save_lights(lights)
        return state_store

    return _configure
