"""keylight - control Elgato Key Light fixtures from the terminal."""

from __future__ import annotations

from importlib.metadata import version

from .config import Settings, get_settings
from .models import DeviceRegistry, LightPatch, LightState, PersistedState
from .storage import RegistryHolder, StateStore

__all__ = [
    "DeviceRegistry",
    "LightPatch",
    "LightState",
    "PersistedState",
    "RegistryHolder",
    "Settings",
    "StateStore",
    "__version__",
    "get_settings",
]

__version__ = version("keylight")
