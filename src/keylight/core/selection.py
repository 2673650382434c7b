"""Which configured devices the next command targets."""

from __future__ import annotations

from dataclasses import dataclass

from keylight.models import DeviceRegistry


@dataclass(frozen=True)
class SelectionMode:
    """All devices when ``ordinal`` is None, otherwise the 1-based ordinal."""

    ordinal: int | None = None

    @property
    def is_all(self) -> bool:
        return self.ordinal is None


ALL = SelectionMode()


def by_ordinal(ordinal: int) -> SelectionMode:
    return SelectionMode(ordinal=ordinal)


class Selection:
    def __init__(self, mode: SelectionMode = ALL) -> None:
        self.mode = mode

    def select(self, mode: SelectionMode, registry: DeviceRegistry | None = None) -> bool:
        """Switch to ``mode``; with a registry, unknown ordinals are ignored.

        Returns False when the ordinal does not exist and the previous mode
        is kept.
        """
        if (
            registry is not None
            and mode.ordinal is not None
            and registry.entry_at(mode.ordinal) is None
        ):
            return False
        self.mode = mode
        return True

    def resolve_addresses(self, registry: DeviceRegistry) -> list[str]:
        if self.mode.ordinal is None:
            return list(dict.fromkeys(registry.addresses))
        address = registry.address_at(self.mode.ordinal)
        return [address] if address is not None else []

    def selected_name(self, registry: DeviceRegistry) -> str | None:
        if self.mode.ordinal is None:
            return None
        entry = registry.entry_at(self.mode.ordinal)
        return entry[0] if entry else None

    def is_targeted(self, ordinal: int) -> bool:
        return self.mode.ordinal is None or self.mode.ordinal == ordinal
