"""
Redis-backed cache of computed routes.

Routing calls cost Geoapify credits, and users tend to re-open directions
to the same center several times.  Routes are stored as JSON under
``route:{mode}:{from}:{to}`` with ``SET ... EX``; coordinates are rounded
to 5 decimals (~1 m) for the key.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Optional

import redis.asyncio as aioredis

from src.domain.entities import Coordinate
from src.domain.enums import TravelMode
from src.domain.navigation import NavigationRoute, RouteStep

logger = logging.getLogger(__name__)


def route_key(origin: Coordinate, destination: Coordinate, mode: TravelMode) -> str:
    return (
        f"route:{TravelMode(mode).value}:"
        f"{origin.latitude:.5f},{origin.longitude:.5f}:"
        f"{destination.latitude:.5f},{destination.longitude:.5f}"
    )


def route_to_json(route: NavigationRoute) -> str:
    return json.dumps(asdict(route))


def route_from_json(raw: str) -> NavigationRoute:
    data = json.loads(raw)
    steps = tuple(
        RouteStep(
            **{
                **s,
                "coordinates": tuple(Coordinate(**c) for c in s["coordinates"]),
            }
        )
        for s in data["steps"]
    )
    return NavigationRoute(
        steps=steps,
        total_distance=data["total_distance"],
        total_duration=data["total_duration"],
        coordinates=tuple(Coordinate(**c) for c in data["coordinates"]),
        summary=data["summary"],
    )


class RouteCache:
    def __init__(self, client: aioredis.Redis, ttl_seconds: int = 300):
        self.redis = client
        self.ttl = ttl_seconds

    async def get(
        self, origin: Coordinate, destination: Coordinate, mode: TravelMode
    ) -> Optional[NavigationRoute]:
        raw = await self.redis.get(route_key(origin, destination, mode))
        if raw is None:
            return None
        logger.debug("Route cache hit")
        return route_from_json(raw)

    async def set(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode,
        route: NavigationRoute,
    ) -> None:
        await self.redis.set(
            route_key(origin, destination, mode), route_to_json(route), ex=self.ttl
        )
