"""
FastAPI application factory.

* Registers routes for centers, navigation, geocoding and admin.
* Opens / closes the shared Geoapify HTTP client and the Redis pool via
  lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, centers, geocoding, navigation
from src.config import settings
from src.infrastructure.geoapify import GeoapifyClient
from src.infrastructure.redis_client import close_redis

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the outbound HTTP client on startup; release it on shutdown."""
    if not settings.geoapify_api_key:
        logger.warning("GEOAPIFY_API_KEY is not set; routing and geocoding are disabled")
    async with httpx.AsyncClient() as http:
        app.state.geoapify = GeoapifyClient(
            http, settings.geoapify_api_key, settings.geoapify_base_url
        )
        yield
    await close_redis()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Autism Center Locator API",
        description=(
            "Finds autism diagnostic, therapy, support and education centers "
            "near a user, and provides turn-by-turn directions with live "
            "off-route detection."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(centers.router, prefix="/api/v1")
    app.include_router(navigation.router, prefix="/api/v1")
    app.include_router(geocoding.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
