from __future__ import annotations

from .paths import (
    APP_NAME,
    CONFIG_FILENAME,
    STATE_FILENAME,
    default_config_path,
    default_data_dir,
    expand_path,
)
from .settings import (
    CONFIG_ENV_VAR,
    DatabaseConfig,
    DeviceConfig,
    DiscoveryConfig,
    LoggingConfig,
    RetryConfig,
    Settings,
    data_dir_from_settings,
    get_settings,
    load_settings,
    log_file_from_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "STATE_FILENAME",
    "DatabaseConfig",
    "DeviceConfig",
    "DiscoveryConfig",
    "LoggingConfig",
    "RetryConfig",
    "Settings",
    "data_dir_from_settings",
    "default_config_path",
    "default_data_dir",
    "expand_path",
    "get_settings",
    "load_settings",
    "log_file_from_settings",
    "render_settings_toml",
    "resolve_config_path",
    "write_settings",
]
