"""
Tests for the center search client.

The backend is an ``httpx.MockTransport``; the TTL cache gets a fake clock
so expiry can be tested without sleeping.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from src.client.centers import CENTERS_PATH, CentersClient, cache_key
from src.domain.entities import Coordinate, GeolocationError
from src.domain.enums import LocationType
from src.infrastructure.cache import TTLCache
from tests.conftest import KL_CENTER, RecordingTransport


def _center_json(id: int, name: str, distance: float) -> dict:
    return {
        "id": id,
        "name": name,
        "type": "therapy",
        "address": f"{name}, Kuala Lumpur",
        "latitude": 3.13,
        "longitude": 101.68,
        "verified": True,
        "distance": distance,
    }


CENTERS_BODY = {"centers": [_center_json(1, "Bangsar", 0.8), _center_json(2, "Mont Kiara", 5.5)]}


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


def _client(handler, clock, **kwargs):
    transport = RecordingTransport(handler)
    http = httpx.AsyncClient(transport=transport, base_url="http://locator.test")
    cache = TTLCache(ttl_seconds=180, clock=clock)
    return CentersClient(http, cache=cache, **kwargs), transport


def _ok(body):
    return lambda request: httpx.Response(200, json=body)


def test_cache_key_format():
    assert cache_key(3.139, 101.6869, 25, None, 20) == "3.139-101.6869-25--20"
    assert cache_key(3.139, 101.6869, 10, LocationType.THERAPY, 5) == "3.139-101.6869-10-therapy-5"


class TestFetchCenters:
    @pytest.mark.asyncio
    async def test_fetches_and_parses(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=KL_CENTER[0],
                                    longitude=KL_CENTER[1])

        centers = await client.fetch_centers()

        assert [c.name for c in centers] == ["Bangsar", "Mont Kiara"]
        assert client.centers == centers
        assert client.cached is False
        assert client.loading is False
        assert client.error is None
        request = transport.requests[0]
        assert request.url.path == CENTERS_PATH
        assert request.url.params["lat"] == "3.139"
        assert request.url.params["radius"] == "25.0"
        assert "type" not in request.url.params

    @pytest.mark.asyncio
    async def test_bare_list_body(self, clock):
        client, _ = _client(_ok(CENTERS_BODY["centers"]), clock, latitude=3.1, longitude=101.6)
        centers = await client.fetch_centers()
        assert len(centers) == 2

    @pytest.mark.asyncio
    async def test_type_filter_is_sent(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=3.1, longitude=101.6)
        await client.search_by_type(LocationType.DIAGNOSTIC)
        assert transport.requests[0].url.params["type"] == "diagnostic"

    @pytest.mark.asyncio
    async def test_cache_hit_skips_http(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=3.1, longitude=101.6)

        first = await client.fetch_centers()
        clock.now += 60
        second = await client.fetch_centers()

        assert len(transport.requests) == 1
        assert second == first
        assert client.cached is True

    @pytest.mark.asyncio
    async def test_stale_entry_refetches(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=3.1, longitude=101.6)

        await client.fetch_centers()
        clock.now += 181
        await client.fetch_centers()

        assert len(transport.requests) == 2
        assert client.cached is False

    @pytest.mark.asyncio
    async def test_different_radius_is_a_different_key(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=3.1, longitude=101.6)
        await client.fetch_centers()
        await client.search_by_radius(10)
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_clear_cache_forces_refetch(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=3.1, longitude=101.6)
        await client.fetch_centers()
        client.clear_cache()
        await client.refresh_centers()
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_missing_coordinates(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock)

        assert await client.fetch_centers() == []
        assert client.error == "Location coordinates are required"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_zero_is_a_valid_coordinate(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock, latitude=0.0, longitude=0.0)
        await client.fetch_centers()
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_http_error_sets_error(self, clock):
        client, _ = _client(lambda request: httpx.Response(500), clock,
                            latitude=3.1, longitude=101.6)

        assert await client.fetch_centers() == []
        assert client.error == "Failed to load autism centers. Please try again."
        assert client.loading is False

    @pytest.mark.asyncio
    async def test_failed_fetch_is_not_cached(self, clock):
        responses = iter([httpx.Response(503), httpx.Response(200, json=CENTERS_BODY)])
        client, transport = _client(lambda request: next(responses), clock,
                                    latitude=3.1, longitude=101.6)

        await client.fetch_centers()
        centers = await client.fetch_centers()

        assert len(transport.requests) == 2
        assert len(centers) == 2
        assert client.error is None

    @pytest.mark.asyncio
    async def test_in_flight_guard(self, clock):
        release = asyncio.Event()

        class SlowTransport(httpx.AsyncBaseTransport):
            calls = 0

            async def handle_async_request(self, request):
                SlowTransport.calls += 1
                await release.wait()
                return httpx.Response(200, json=CENTERS_BODY)

        http = httpx.AsyncClient(transport=SlowTransport(), base_url="http://locator.test")
        client = CentersClient(http, latitude=3.1, longitude=101.6,
                               cache=TTLCache(clock=clock))

        first = asyncio.create_task(client.fetch_centers())
        await asyncio.sleep(0)
        assert client.loading is True

        assert await client.fetch_centers() == []
        release.set()
        assert len(await first) == 2
        assert SlowTransport.calls == 1

    @pytest.mark.asyncio
    async def test_other_key_proceeds_while_one_is_in_flight(self, clock):
        release = asyncio.Event()
        near_body = {"centers": [_center_json(1, "Bangsar", 0.8)]}

        class SlowWideTransport(httpx.AsyncBaseTransport):
            def __init__(self):
                self.radii = []

            async def handle_async_request(self, request):
                radius = request.url.params["radius"]
                self.radii.append(radius)
                if radius == "25.0":
                    await release.wait()
                    return httpx.Response(200, json=CENTERS_BODY)
                return httpx.Response(200, json=near_body)

        transport = SlowWideTransport()
        http = httpx.AsyncClient(transport=transport, base_url="http://locator.test")
        client = CentersClient(http, latitude=3.1, longitude=101.6, radius=25.0,
                               cache=TTLCache(clock=clock))

        wide = asyncio.create_task(client.fetch_centers())
        while not transport.radii:
            await asyncio.sleep(0)

        near = await client.fetch_centers(radius=10)

        assert [c.name for c in near] == ["Bangsar"]
        assert transport.radii == ["25.0", "10"]
        assert client.loading is True

        release.set()
        assert len(await wide) == 2
        assert client.loading is False

    @pytest.mark.asyncio
    async def test_non_json_body_sets_error(self, clock):
        client, _ = _client(lambda request: httpx.Response(200, content=b"<html>oops"),
                            clock, latitude=3.1, longitude=101.6)

        assert await client.fetch_centers() == []
        assert client.error == "Failed to load autism centers. Please try again."
        assert client.loading is False

    @pytest.mark.asyncio
    async def test_invalid_records_set_error(self, clock):
        client, _ = _client(_ok({"centers": [{"id": "x"}]}), clock,
                            latitude=3.1, longitude=101.6)

        assert await client.fetch_centers() == []
        assert client.error == "Failed to load autism centers. Please try again."
        assert len(client.cache) == 0


class TestFindNearbyWithLocation:
    @pytest.mark.asyncio
    async def test_success_updates_position(self, clock):
        client, transport = _client(_ok(CENTERS_BODY), clock)

        async def locate():
            return Coordinate(*KL_CENTER)

        centers = await client.find_nearby_with_location(locate)

        assert len(centers) == 2
        assert (client.latitude, client.longitude) == KL_CENTER
        assert transport.requests[0].url.params["lng"] == "101.6869"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "code, message",
        [
            (1, "Location access denied. Please enable location services."),
            (2, "Location information is unavailable."),
            (3, "Location request timed out."),
            (99, "Failed to get your location"),
        ],
    )
    async def test_geolocation_failures(self, clock, code, message):
        client, transport = _client(_ok(CENTERS_BODY), clock)

        async def locate():
            raise GeolocationError(code)

        assert await client.find_nearby_with_location(locate) == []
        assert client.error == message
        assert transport.requests == []
