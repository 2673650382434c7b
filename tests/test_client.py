import asyncio

import httpx
import pytest

from keylight.core import DeviceOffline, DeviceRejected, LightClient
from keylight.models import LightPatch, LightState
from keylight.utils.retry import RetryExhausted


def test_read_converts_wire_temperature(fake_lights, make_client):
    """Test reads report temperature in Kelvin."""
    fake_lights.add("10.0.0.2", on=True, brightness=40, wire=200)

    async def _run():
        async with make_client() as client:
            return await client.read("10.0.0.2")

    assert asyncio.run(_run()) == LightState(on=True, brightness=40, temperature=5000)


def test_read_reports_written_kelvin_exactly(fake_lights, make_client):
    """Test a read after a write reports the Kelvin that was written."""
    fake_lights.add("10.0.0.2")

    async def _run():
        async with make_client() as client:
            await client.write("10.0.0.2", LightPatch(temperature=7000))
            return await client.read("10.0.0.2")

    state = asyncio.run(_run())
    assert fake_lights.lights["10.0.0.2"]["temperature"] == 143
    assert state.temperature == 7000


def test_read_uses_first_light_only():
    """Test only the first entry of the lights array is used."""
    def _two_lights(request):
        return httpx.Response(
            200,
            json={
                "numberOfLights": 2,
                "lights": [
                    {"on": 0, "brightness": 20, "temperature": 250},
                    {"on": 1, "brightness": 99, "temperature": 143},
                ],
            },
        )

    client = LightClient(transport=httpx.MockTransport(_two_lights))

    async def _run():
        async with client:
            return await client.read("10.0.0.2")

    assert asyncio.run(_run()).brightness == 20


@pytest.mark.parametrize("failure", ["offline", "unreadable"])
def test_read_failures_are_offline(fake_lights, make_client, failure):
    """Test transport errors and bad statuses read as offline."""
    fake_lights.add("10.0.0.2")
    getattr(fake_lights, failure).add("10.0.0.2")

    async def _run():
        async with make_client() as client:
            await client.read("10.0.0.2")

    with pytest.raises(DeviceOffline) as excinfo:
        asyncio.run(_run())
    assert excinfo.value.address == "10.0.0.2"


def test_non_200_write_is_rejected(fake_lights, make_client):
    """Test a non-200 write raises DeviceRejected."""
    fake_lights.add("10.0.0.2")
    fake_lights.rejecting.add("10.0.0.2")

    async def _run():
        async with make_client() as client:
            await client.write("10.0.0.2", LightPatch(on=True))

    with pytest.raises(DeviceRejected) as excinfo:
        asyncio.run(_run())
    assert excinfo.value.status_code == 400


def test_toggle_slow_inverts_power(fake_lights, make_client):
    """Test the slow toggle inverts the read power state."""
    fake_lights.add("10.0.0.2", on=True)

    async def _run():
        async with make_client() as client:
            return await client.toggle_slow("10.0.0.2")

    assert asyncio.run(_run()) is False
    assert fake_lights.written("10.0.0.2") == [{"on": 0}]


def test_toggle_slow_turns_on_when_state_unknown(fake_lights, make_client):
    """Test the slow toggle turns the light on when it cannot read it."""
    fake_lights.add("10.0.0.2", on=True)
    fake_lights.unreadable.add("10.0.0.2")

    async def _run():
        async with make_client() as client:
            return await client.toggle_slow("10.0.0.2")

    assert asyncio.run(_run()) is True
    assert fake_lights.written("10.0.0.2") == [{"on": 1}]


def test_toggle_fast_retries_until_success(fake_lights, make_client):
    """Test the fast toggle survives two failed attempts."""
    fake_lights.add("10.0.0.2", on=False)
    fake_lights.failures["10.0.0.2"] = 2

    async def _run():
        async with make_client(attempts=3) as client:
            return await client.toggle_fast("10.0.0.2")

    assert asyncio.run(_run()) is True
    assert fake_lights.written("10.0.0.2") == [{"on": 1}]


def test_toggle_fast_gives_up_without_writing(fake_lights, make_client):
    """Test the fast toggle writes nothing when every read fails."""
    fake_lights.add("10.0.0.2")
    fake_lights.unreadable.add("10.0.0.2")

    async def _run():
        async with make_client(attempts=2) as client:
            await client.toggle_fast("10.0.0.2")

    with pytest.raises(RetryExhausted) as excinfo:
        asyncio.run(_run())
    assert isinstance(excinfo.value.last_exception, DeviceOffline)
    assert fake_lights.puts == []


def test_read_many_returns_errors_per_address(fake_lights, make_client):
    """Test concurrent reads return errors instead of raising."""
    fake_lights.add("10.0.0.2", brightness=70)
    fake_lights.add("10.0.0.3")
    fake_lights.offline.add("10.0.0.3")

    async def _run():
        async with make_client() as client:
            return await client.read_many(["10.0.0.2", "10.0.0.3"])

    states = asyncio.run(_run())
    assert states["10.0.0.2"].brightness == 70
    assert isinstance(states["10.0.0.3"], DeviceOffline)


def test_url_brackets_ipv6_hosts():
    """Test IPv6 addresses are bracketed in URLs."""
    client = LightClient()
    assert client.url("10.0.0.2") == "http://10.0.0.2:9123/elgato/lights"
    assert client.url("fe80::1") == "http://[fe80::1]:9123/elgato/lights"
