"""
Center search client
====================

Front-end side of the locator: obtains the user's position, asks the
``/api/v1/autism-centers`` endpoint for nearby centers and keeps the
result as plain state (``centers``, ``loading``, ``error``, ``cached``)
for whatever UI sits on top.

Caching
-------
Successful responses are kept in a ``TTLCache`` keyed by
``"{lat}-{lng}-{radius}-{type}-{limit}"`` for ``center_cache_ttl_seconds``
(3 minutes by default).  A fresh hit skips the HTTP call entirely.

Concurrency
-----------
The cache is consulted first.  A miss whose key is already being fetched
returns the current ``centers`` untouched; misses for other keys proceed
independently.  ``loading`` is true while any fetch is in flight.  There
is no cancellation; if two fetches for different keys overlap, the last
one to finish wins.

Any failure (transport, HTTP status, a body that is not JSON, or records
that do not validate) ends up in ``error`` and yields ``[]``.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from src.api.schemas import AutismCenterResponse
from src.config import settings
from src.domain.entities import Coordinate, GeolocationError
from src.domain.enums import LocationType
from src.infrastructure.cache import TTLCache

logger = logging.getLogger(__name__)

CENTERS_PATH = "/api/v1/autism-centers"

LocationProvider = Callable[[], Awaitable[Coordinate]]


def cache_key(
    latitude: float,
    longitude: float,
    radius: float,
    type: Optional[LocationType],
    limit: int,
) -> str:
    type_part = LocationType(type).value if type else ""
    return f"{latitude}-{longitude}-{radius}-{type_part}-{limit}"


def _parse_centers(body: Any) -> list[AutismCenterResponse]:
    items = body.get("centers", []) if isinstance(body, dict) else body
    return [AutismCenterResponse.model_validate(item) for item in items]


class CentersClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        radius: float = settings.default_radius_km,
        type: Optional[LocationType] = None,
        limit: int = settings.default_limit,
        cache: Optional[TTLCache[list[AutismCenterResponse]]] = None,
    ):
        self.http = http
        self.latitude = latitude
        self.longitude = longitude
        self.radius = radius
        self.type = type
        self.limit = limit
        self.cache = cache or TTLCache(
            ttl_seconds=settings.center_cache_ttl_seconds,
            max_entries=settings.center_cache_max_entries,
        )

        self.centers: list[AutismCenterResponse] = []
        self.loading = False
        self.error: Optional[str] = None
        self.cached = False
        self._in_flight: set[str] = set()

    async def fetch_centers(
        self,
        *,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        radius: Optional[float] = None,
        type: Optional[LocationType] = None,
        limit: Optional[int] = None,
    ) -> list[AutismCenterResponse]:
        lat = latitude if latitude is not None else self.latitude
        lng = longitude if longitude is not None else self.longitude
        radius = radius if radius is not None else self.radius
        type = type if type is not None else self.type
        limit = limit if limit is not None else self.limit

        if lat is None or lng is None:
            self.error = "Location coordinates are required"
            return []

        key = cache_key(lat, lng, radius, type, limit)
        hit = self.cache.get(key)
        if hit is not None:
            self.centers = hit
            self.cached = True
            self.error = None
            return hit

        if key in self._in_flight:
            logger.debug("Fetch for %s already in flight; ignoring request", key)
            return self.centers

        params: dict[str, Any] = {"lat": lat, "lng": lng, "radius": radius, "limit": limit}
        if type:
            params["type"] = LocationType(type).value

        self._in_flight.add(key)
        self.loading = True
        self.error = None
        try:
            response = await self.http.get(CENTERS_PATH, params=params)
            response.raise_for_status()
            centers = _parse_centers(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            # ValueError covers undecodable bodies and pydantic validation
            logger.warning("Center fetch failed: %s", exc)
            self.error = "Failed to load autism centers. Please try again."
            return []
        finally:
            self._in_flight.discard(key)
            self.loading = bool(self._in_flight)

        self.cache.set(key, centers)
        self.centers = centers
        self.cached = False
        return centers

    async def search_by_type(self, type: LocationType) -> list[AutismCenterResponse]:
        return await self.fetch_centers(type=type)

    async def search_by_radius(self, radius: float) -> list[AutismCenterResponse]:
        return await self.fetch_centers(radius=radius)

    async def refresh_centers(self) -> list[AutismCenterResponse]:
        return await self.fetch_centers()

    def clear_cache(self) -> None:
        self.cache.clear()

    async def find_nearby_with_location(
        self, locate: LocationProvider
    ) -> list[AutismCenterResponse]:
        """Resolve the device position via *locate*, then fetch around it.

        Geolocation failures end up in ``error`` as user-facing text.
        """
        try:
            position = await locate()
        except GeolocationError as exc:
            logger.info("Geolocation failed with code %s", exc.code)
            self.error = exc.user_message
            return []

        self.latitude = position.latitude
        self.longitude = position.longitude
        return await self.fetch_centers(
            latitude=position.latitude, longitude=position.longitude
        )
