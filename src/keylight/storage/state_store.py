from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from keylight.config import STATE_FILENAME
from keylight.models import PersistedState

logger = logging.getLogger(__name__)


class StateStore:
    """JSON document holding the registry and the last applied values.

    The document is read once on first access and cached; every save
    rewrites the whole file atomically.
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._path = data_dir / STATE_FILENAME
        self._state: PersistedState | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def state(self) -> PersistedState:
        if self._state is None:
            self._state = self.load()
        return self._state

    def load(self) -> PersistedState:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return PersistedState()
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s, using defaults: %s", self._path, exc)
            return PersistedState()

        try:
            return PersistedState.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid state file %s, using defaults: %s", self._path, exc)
            return PersistedState()

    def save(self, state: PersistedState) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._data_dir, prefix=".state-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(state.to_json_dict(), handle, indent=2)
                handle.write("\n")
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        self._state = state
        logger.debug("Saved state to %s", self._path)

    def save_lights(self, lights: dict[str, str]) -> None:
        self.save(self.state.model_copy(update={"lights": dict(lights)}))

    def save_defaults(
        self, brightness: int | None = None, temperature: int | None = None
    ) -> None:
        changes: dict[str, int] = {}
        if brightness is not None:
            changes["last_brightness"] = brightness
        if temperature is not None:
            changes["last_temperature"] = temperature
        if changes:
            self.save(self.state.model_copy(update=changes))

    def save_selected_light(self, name: str) -> None:
        self.save(self.state.model_copy(update={"last_selected_light": name}))
