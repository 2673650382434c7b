from __future__ import annotations

from .client import LightClient
from .control import Action, Command, ControlService, Summary
from .discovery import discover_lights
from .errors import (
    DeviceError,
    DeviceOffline,
    DeviceRejected,
    InvalidInput,
    KeylightError,
    NoTargets,
)
from .focus import Direction, Focus, FocusStateMachine
from .router import CommandRouter, Request, parse
from .selection import ALL, Selection, SelectionMode, by_ordinal

__all__ = [
    "ALL",
    "Action",
    "Command",
    "CommandRouter",
    "ControlService",
    "DeviceError",
    "DeviceOffline",
    "DeviceRejected",
    "Direction",
    "Focus",
    "FocusStateMachine",
    "InvalidInput",
    "KeylightError",
    "LightClient",
    "NoTargets",
    "Request",
    "Selection",
    "SelectionMode",
    "Summary",
    "by_ordinal",
    "discover_lights",
    "parse",
]
