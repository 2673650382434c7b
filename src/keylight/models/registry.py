"""Ordered device registry snapshot."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DeviceRegistry(BaseModel):
    """Immutable snapshot of configured devices (name -> address).

    Iteration order is the order devices were discovered or loaded and
    defines the 1-based ordinals used to address them. A new discovery
    produces a new snapshot with a higher ``version``.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    lights: dict[str, str] = Field(default_factory=dict)
    version: int = 0

    def __len__(self) -> int:
        return len(self.lights)

    @property
    def names(self) -> list[str]:
        return list(self.lights)

    @property
    def addresses(self) -> list[str]:
        return list(self.lights.values())

    def entry_at(self, ordinal: int) -> tuple[str, str] | None:
        if ordinal < 1 or ordinal > len(self.lights):
            return None
        name = self.names[ordinal - 1]
        return name, self.lights[name]

    def address_at(self, ordinal: int) -> str | None:
        entry = self.entry_at(ordinal)
        return entry[1] if entry else None

    def find(self, identifier: str) -> tuple[str, str] | None:
        """Look a device up by exact name, or by ordinal if the name is unknown."""
        if identifier in self.lights:
            return identifier, self.lights[identifier]
        if identifier.isdigit():
            return self.entry_at(int(identifier))
        return None

    def name_for(self, address: str) -> str:
        for name, value in self.lights.items():
            if value == address:
                return name
        return address

    def replaced(self, lights: dict[str, str]) -> DeviceRegistry:
        return DeviceRegistry(lights=dict(lights), version=self.version + 1)
