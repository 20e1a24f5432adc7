"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL / Redis.  The production models carry no
PostgreSQL-only column types, so the real ``Base`` metadata is used.
Geoapify is replaced by an ``httpx.MockTransport`` that records every
request it receives.
"""

from __future__ import annotations

from typing import AsyncGenerator, Callable
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.infrastructure.database import Base
from src.infrastructure.geoapify import GeoapifyClient
from src.infrastructure.models import AutismCenterModel  # noqa: F401  (registers table)


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

TEST_API_KEY = "test-key"

# Kuala Lumpur city center and a few well-known places around it
KL_CENTER = (3.1390, 101.6869)
MID_VALLEY = (3.0738, 101.7072)


def routing_payload() -> dict:
    """A trimmed Geoapify routing response: KL city center -> Mid Valley."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": "MultiLineString",
                    "coordinates": [
                        [
                            [101.6869, 3.1390],
                            [101.6900, 3.1300],
                            [101.7000, 3.1000],
                            [101.7072, 3.0738],
                        ]
                    ],
                },
                "properties": {
                    "mode": "drive",
                    "distance": 7600,
                    "time": 900,
                    "legs": [
                        {
                            "distance": 7600,
                            "time": 900,
                            "steps": [
                                {
                                    "from_index": 0,
                                    "to_index": 1,
                                    "distance": 1200,
                                    "time": 150,
                                    "name": "Jalan Tun Razak",
                                    "instruction": {
                                        "text": "Drive south on Jalan Tun Razak.",
                                        "type": "depart",
                                    },
                                },
                                {
                                    "from_index": 1,
                                    "to_index": 3,
                                    "distance": 6400,
                                    "time": 750,
                                    "name": "Jalan Syed Putra",
                                    "instruction": {
                                        "text": "Turn <b>left</b> onto Jalan Syed Putra.",
                                        "type": "turn",
                                        "modifier": "left",
                                    },
                                },
                            ],
                        }
                    ],
                },
            }
        ],
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_geoapify():
    """Factory: ``make_geoapify(handler, api_key=...) -> (client, transport)``."""

    def _make(handler, api_key: str = TEST_API_KEY):
        transport = RecordingTransport(handler)
        http = httpx.AsyncClient(transport=transport)
        return GeoapifyClient(http, api_key, "https://geoapify.test"), transport

    return _make


@pytest.fixture
def fake_route_cache():
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock(return_value=None)
    return cache


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
