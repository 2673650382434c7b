from __future__ import annotations

import json
import logging
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .paths import default_config_path, default_data_dir, expand_path

CONFIG_ENV_VAR = "KEYLIGHT_CONFIG"
SECTIONS = ("database", "device", "discovery", "retry", "logging")

logger = logging.getLogger(__name__)


class DatabaseConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    path: str = Field(default_factory=lambda: str(default_data_dir()))


class DeviceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    port: int = Field(default=9123, ge=1, le=65535)
    read_timeout: float = Field(default=2.0, gt=0, le=5)
    write_timeout: float = Field(default=2.0, gt=0, le=5)
    parallel_requests: int = Field(default=8, ge=1, le=64)


class DiscoveryConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    timeout: float = Field(default=3.0, gt=0, le=30)
    startup_timeout: float = Field(default=2.0, gt=0, le=30)
    service_type: str = "_elg._tcp.local."


class RetryConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    attempts: int = Field(default=3, ge=1, le=10)
    delay: float = Field(default=0.1, ge=0, le=5)


class LoggingConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    level: str | None = None
    file: str | None = None


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    device: DeviceConfig = Field(default_factory=DeviceConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        logger.debug("Loading config from %s", path)
        return load_settings(path)
    logger.debug("No config at %s, using defaults", path)
    return Settings()


def data_dir_from_settings(settings: Settings) -> Path:
    return expand_path(settings.database.path)


def log_file_from_settings(settings: Settings) -> Path | None:
    if not settings.logging.file:
        return None
    return expand_path(settings.logging.file)


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    return str(value)


def render_settings_toml(settings: Settings) -> str:
    lines = ["# keylight configuration"]
    for section in SECTIONS:
        lines += ["", f"[{section}]"]
        for key, value in getattr(settings, section).model_dump().items():
            # unset optional keys are left out; TOML has no null
            if value is not None:
                lines.append(f"{key} = {_toml_value(value)}")
    lines.append("")
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
