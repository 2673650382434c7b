"""Data models for keylight."""

from keylight.models.device import LightPatch, LightState
from keylight.models.registry import DeviceRegistry
from keylight.models.state import PersistedState

__all__ = [
    "DeviceRegistry",
    "LightPatch",
    "LightState",
    "PersistedState",
]
