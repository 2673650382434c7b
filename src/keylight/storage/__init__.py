from __future__ import annotations

from .registry import RegistryHolder
from .state_store import StateStore

__all__ = ["RegistryHolder", "StateStore"]
