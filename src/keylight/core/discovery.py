from __future__ import annotations

import asyncio
import logging
import threading

from zeroconf import ServiceBrowser, ServiceInfo, ServiceListener, Zeroconf

from keylight.config import DiscoveryConfig

logger = logging.getLogger(__name__)


def _pick_ip(info: ServiceInfo) -> str | None:
    addresses = info.parsed_addresses()
    if not addresses:
        return None
    for address in addresses:
        if ":" not in address:
            return address
    return addresses[0]


def _strip_service_suffix(name: str, service_type: str) -> str:
    suffix = f".{service_type}"
    if name.endswith(suffix):
        return name[: -len(suffix)]
    return name.rstrip(".")


class KeyLightListener(ServiceListener):
    def __init__(self, service_type: str, info_timeout: float) -> None:
        self._service_type = service_type
        self._info_timeout_ms = max(int(info_timeout * 1000), 1)
        self._lock = threading.Lock()
        self._found: dict[str, tuple[str, str]] = {}

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        info = zc.get_service_info(type_, name, timeout=self._info_timeout_ms)
        if not info:
            return
        ip = _pick_ip(info)
        if ip is None:
            return
        label = _strip_service_suffix(name, self._service_type) or ip
        with self._lock:
            self._found[name] = (label, ip)
        logger.debug("Discovered light '%s' at %s via mDNS", label, ip)

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, _zc: Zeroconf, _type_: str, name: str) -> None:
        with self._lock:
            self._found.pop(name, None)

    def lights(self) -> dict[str, str]:
        with self._lock:
            entries = sorted(self._found.values())
        return {label: ip for label, ip in entries}


async def discover_lights(
    config: DiscoveryConfig, timeout: float | None = None
) -> dict[str, str]:
    """Browse mDNS for ``timeout`` seconds; returns name -> address, sorted by name."""
    budget = config.timeout if timeout is None else timeout
    logger.debug(
        "Discovering lights via mDNS (service=%s, timeout=%.2fs)",
        config.service_type,
        budget,
    )
    zeroconf = Zeroconf()
    listener = KeyLightListener(config.service_type, budget)
    ServiceBrowser(zeroconf, config.service_type, listener)
    try:
        await asyncio.sleep(budget)
    finally:
        await asyncio.to_thread(zeroconf.close)

    lights = listener.lights()
    logger.debug("mDNS discovery complete: found %d lights", len(lights))
    return lights
