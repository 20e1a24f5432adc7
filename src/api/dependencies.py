"""FastAPI dependency injection helpers."""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.infrastructure.database import async_session_factory
from src.infrastructure.geoapify import GeoapifyClient
from src.infrastructure.redis_client import get_redis
from src.infrastructure.route_cache import RouteCache


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_geoapify(request: Request) -> GeoapifyClient:
    """The application-wide client created in the lifespan handler."""
    return request.app.state.geoapify


def get_route_cache() -> RouteCache:
    return RouteCache(get_redis(), ttl_seconds=settings.route_cache_ttl_seconds)
