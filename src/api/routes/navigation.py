"""
Navigation endpoints
====================

GET  /api/v1/navigation/directions -- turn-by-turn route between two points
POST /api/v1/navigation/progress   -- match a live position against a route
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from redis.exceptions import RedisError

from src.api.dependencies import get_geoapify, get_route_cache
from src.api.middleware import limiter
from src.api.schemas import (
    ErrorResponse,
    NavigationRouteSchema,
    ProgressRequest,
    ProgressResponse,
    RouteStepSchema,
)
from src.config import settings
from src.domain.entities import Coordinate, InvalidCoordinatesError
from src.domain.enums import TravelMode
from src.domain.navigation import (
    get_current_step,
    get_estimated_arrival,
    get_maneuver_icon,
    get_voice_instruction,
    is_off_route,
)
from src.infrastructure.geoapify import GeoapifyClient, GeoapifyError, RoutingError
from src.infrastructure.route_cache import RouteCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get(
    "/directions",
    response_model=NavigationRouteSchema,
    summary="Turn-by-turn directions",
    responses={
        404: {"model": ErrorResponse, "description": "The provider found no route."},
        422: {"model": ErrorResponse, "description": "Coordinates out of range."},
        502: {"model": ErrorResponse, "description": "The routing provider failed."},
        503: {"model": ErrorResponse, "description": "Routing is not configured."},
    },
)
@limiter.limit("30/minute")
async def directions(
    request: Request,
    from_lat: float = Query(...),
    from_lon: float = Query(...),
    to_lat: float = Query(...),
    to_lon: float = Query(...),
    mode: TravelMode = TravelMode.DRIVE,
    geoapify: GeoapifyClient = Depends(get_geoapify),
    cache: RouteCache = Depends(get_route_cache),
):
    origin = Coordinate(from_lat, from_lon)
    destination = Coordinate(to_lat, to_lon)

    if origin.is_valid() and destination.is_valid():
        try:
            cached = await cache.get(origin, destination, mode)
        except RedisError:
            logger.warning("Route cache unavailable", exc_info=True)
            cached = None
        if cached is not None:
            return NavigationRouteSchema.model_validate(cached)

    try:
        route = await geoapify.get_directions(origin, destination, mode)
    except InvalidCoordinatesError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except RoutingError as exc:
        logger.error("Routing provider failure: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except GeoapifyError as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    if route is None:
        raise HTTPException(status_code=404, detail="No route found")

    try:
        await cache.set(origin, destination, mode, route)
    except RedisError:
        logger.warning("Could not store route in cache", exc_info=True)

    return NavigationRouteSchema.model_validate(route)


@router.post(
    "/progress",
    response_model=ProgressResponse,
    summary="Current step and off-route status for a live position",
)
@limiter.limit(settings.rate_limit)
async def progress(request: Request, body: ProgressRequest):
    user = body.location.to_domain()
    route = body.route.to_domain()
    threshold = body.threshold_m or settings.off_route_threshold_m

    current = get_current_step(user, route)
    off_route = is_off_route(user, route.coordinates, threshold)
    if off_route:
        logger.info("Position %s is off route (threshold %.0f m)", user, threshold)

    if current.step is None:
        return ProgressResponse(step_index=current.step_index, off_route=off_route)

    remaining = sum(s.duration for s in route.steps[current.step_index :])
    return ProgressResponse(
        step_index=current.step_index,
        step=RouteStepSchema.model_validate(current.step),
        off_route=off_route,
        voice_instruction=get_voice_instruction(current.step),
        maneuver_icon=get_maneuver_icon(current.step.maneuver, current.step.direction),
        estimated_arrival=get_estimated_arrival(remaining),
    )
