from __future__ import annotations

import logging

from keylight.models import DeviceRegistry

from .state_store import StateStore

logger = logging.getLogger(__name__)


class RegistryHolder:
    """Owns the current registry snapshot.

    Readers take ``current`` once per operation and keep using that
    snapshot. ``replace`` persists the new mapping first and only then
    swaps the reference, so a failed save leaves the old snapshot active.
    """

    def __init__(self, store: StateStore) -> None:
        self._store = store
        self._current = DeviceRegistry(lights=store.state.lights)

    @property
    def current(self) -> DeviceRegistry:
        return self._current

    def replace(self, lights: dict[str, str]) -> DeviceRegistry:
        snapshot = self._current.replaced(lights)
        self._store.save_lights(snapshot.lights)
        self._current = snapshot
        logger.info(
            "Registry replaced (version %d, %d devices)",
            snapshot.version,
            len(snapshot),
        )
        return snapshot
