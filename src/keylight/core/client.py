"""HTTP client for the Key Light control API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

import httpx

from keylight.config import DeviceConfig, RetryConfig
from keylight.models import LightPatch, LightState
from keylight.utils.retry import retry_async
from keylight.utils.units import kelvin_to_wire

from .errors import DeviceError, DeviceOffline, DeviceRejected

logger = logging.getLogger(__name__)

LIGHTS_PATH = "/elgato/lights"


class LightClient:
    """Reads and writes the state of single fixtures by network address.

    One ``httpx.AsyncClient`` is shared by all calls; each call carries its
    own timeout. Only the first entry of the ``lights`` array is used.
    """

    def __init__(
        self,
        config: DeviceConfig | None = None,
        retry: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or DeviceConfig()
        self.retry = retry or RetryConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        # address -> (wire value written, Kelvin requested)
        self._written_kelvin: dict[str, tuple[int, int]] = {}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            limits = httpx.Limits(
                max_connections=self.config.parallel_requests,
                max_keepalive_connections=self.config.parallel_requests,
            )
            self._client = httpx.AsyncClient(
                transport=self._transport,
                limits=limits,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> LightClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def url(self, address: str) -> str:
        host = f"[{address}]" if ":" in address else address
        return f"http://{host}:{self.config.port}{LIGHTS_PATH}"

    async def read(self, address: str) -> LightState:
        """Fetch the live state of the fixture at ``address``.

        Raises:
            DeviceOffline: On transport errors, timeouts, non-200 status,
                undecodable bodies, or an empty ``lights`` array.
        """
        try:
            response = await self.client.get(
                self.url(address), timeout=self.config.read_timeout
            )
        except httpx.HTTPError as exc:
            raise DeviceOffline(address, f"failed to get light state: {exc}") from exc

        if response.status_code != 200:
            raise DeviceOffline(address, f"API returned status {response.status_code}")

        try:
            lights = response.json()["lights"]
        except (KeyError, TypeError, ValueError) as exc:
            raise DeviceOffline(address, f"failed to decode response: {exc}") from exc
        if not lights:
            raise DeviceOffline(address, "no lights in response")

        try:
            raw = lights[0]
            state = LightState.from_api(raw)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise DeviceOffline(address, f"failed to decode response: {exc}") from exc

        remembered = self._written_kelvin.get(address)
        if remembered is not None and remembered[0] == int(raw["temperature"]):
            state = state.model_copy(update={"temperature": remembered[1]})
        return state

    async def write(self, address: str, patch: LightPatch) -> None:
        """Send ``patch`` to the fixture at ``address``.

        Raises:
            DeviceOffline: On transport errors or timeouts.
            DeviceRejected: When the device answers with a non-200 status.
        """
        payload = patch.to_api()
        try:
            response = await self.client.put(
                self.url(address), json=payload, timeout=self.config.write_timeout
            )
        except httpx.HTTPError as exc:
            raise DeviceOffline(address, f"failed to send update: {exc}") from exc

        if response.status_code != 200:
            raise DeviceRejected(address, response.status_code)

        if patch.temperature is not None:
            self._written_kelvin[address] = (
                kelvin_to_wire(patch.temperature),
                patch.temperature,
            )
        logger.debug("Updated %s with %s", address, payload)

    async def _toggle_once(self, address: str, optimistic: bool) -> bool:
        try:
            state = await self.read(address)
        except DeviceOffline:
            if not optimistic:
                raise
            logger.debug("State of %s unknown, turning it on", address)
            await self.write(address, LightPatch(on=True))
            return True

        target = not state.on
        await self.write(address, LightPatch(on=target))
        return target

    async def toggle_slow(self, address: str) -> bool:
        """Invert the power state after confirming it; returns the new state.

        If the state cannot be read the light is switched on.
        """
        return await self._toggle_once(address, optimistic=True)

    async def toggle_fast(self, address: str) -> bool:
        """Toggle with sequential retries for single repeated physical actions.

        Raises:
            RetryExhausted: After ``retry.attempts`` failures, wrapping the
                last device error.
        """
        return await retry_async(
            lambda: self._toggle_once(address, optimistic=False),
            attempts=self.retry.attempts,
            delay=self.retry.delay,
            retryable_exceptions=(DeviceError,),
        )

    async def read_many(
        self, addresses: Sequence[str]
    ) -> dict[str, LightState | DeviceError]:
        """Read several fixtures concurrently; failures are returned, not raised."""

        async def _one(address: str) -> LightState | DeviceError:
            try:
                return await self.read(address)
            except DeviceError as exc:
                return exc

        results = await asyncio.gather(*(_one(address) for address in addresses))
        return dict(zip(addresses, results))
