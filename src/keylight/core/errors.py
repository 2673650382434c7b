"""Error taxonomy for device control."""

from __future__ import annotations


class KeylightError(Exception):
    """Base class for keylight errors."""


class DeviceError(KeylightError):
    """A device-facing failure, reported per address."""

    def __init__(self, address: str, message: str) -> None:
        self.address = address
        super().__init__(message)


class DeviceOffline(DeviceError):
    """Device unreachable, timed out, or answered with something undecodable."""


class DeviceRejected(DeviceError):
    """Device reachable but answered with a non-200 status."""

    def __init__(self, address: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(address, f"API returned status {status_code}")


class InvalidInput(KeylightError, ValueError):
    """Malformed or out-of-range argument, or unknown device identifier."""


class NoTargets(KeylightError):
    """Nothing to act on: empty selection or no readable device."""
