"""
Geocoding endpoints
===================

GET /api/v1/geocode/search        -- address -> candidate coordinates
GET /api/v1/geocode/reverse       -- coordinates -> address
GET /api/v1/geocode/autocomplete  -- type-ahead suggestions
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.dependencies import get_geoapify
from src.api.middleware import limiter
from src.api.schemas import GeocodeResultSchema, ReverseGeocodeSchema
from src.domain.entities import Coordinate
from src.infrastructure.geoapify import GeoapifyClient, GeoapifyError, GeocodingError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/geocode", tags=["geocoding"])


def _provider_failure(exc: GeoapifyError) -> HTTPException:
    if isinstance(exc, GeocodingError):
        logger.error("Geocoding provider failure: %s", exc)
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=503, detail=str(exc))


@router.get("/search", response_model=list[GeocodeResultSchema])
@limiter.limit("30/minute")
async def search(
    request: Request,
    text: str = Query(...),
    geoapify: GeoapifyClient = Depends(get_geoapify),
):
    try:
        return await geoapify.geocode_address(text)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except GeoapifyError as exc:
        raise _provider_failure(exc)


@router.get(
    "/reverse",
    response_model=ReverseGeocodeSchema,
    responses={404: {"description": "No address at this point."}},
)
@limiter.limit("30/minute")
async def reverse(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    geoapify: GeoapifyClient = Depends(get_geoapify),
):
    try:
        result = await geoapify.reverse_geocode(Coordinate(lat, lon))
    except GeoapifyError as exc:
        raise _provider_failure(exc)
    if result is None:
        raise HTTPException(status_code=404, detail="No address found")
    return result


@router.get("/autocomplete", response_model=list[GeocodeResultSchema])
@limiter.limit("60/minute")
async def autocomplete(
    request: Request,
    text: str = Query(...),
    bias_lat: Optional[float] = Query(None, ge=-90, le=90),
    bias_lon: Optional[float] = Query(None, ge=-180, le=180),
    geoapify: GeoapifyClient = Depends(get_geoapify),
):
    bias = None
    if bias_lat is not None and bias_lon is not None:
        bias = Coordinate(bias_lat, bias_lon)
    try:
        return await geoapify.autocomplete(text, bias=bias)
    except GeoapifyError as exc:
        raise _provider_failure(exc)
