"""
Autism center endpoints
=======================

GET  /api/v1/autism-centers          -- centers within a radius, nearest first
GET  /api/v1/autism-centers/nearest  -- the single nearest center
GET  /api/v1/autism-centers/search   -- free-text search
GET  /api/v1/autism-centers/stats    -- counts by type / verification
POST /api/v1/autism-centers          -- register a new center
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db
from src.api.middleware import limiter
from src.api.schemas import (
    AutismCenterResponse,
    CenterCreateRequest,
    CenterStatsResponse,
)
from src.config import settings
from src.domain.entities import Coordinate
from src.domain.enums import LocationType
from src.domain.proximity import (
    Ranked,
    distance_to,
    filter_centers_within_radius,
    find_nearest_center,
)
from src.infrastructure.repositories import AutismCenterRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/autism-centers", tags=["autism-centers"])


def _with_distance(ranked: Ranked) -> AutismCenterResponse:
    dto = AutismCenterResponse.model_validate(ranked.center)
    return dto.model_copy(update={"distance": round(ranked.distance, 2)})


@router.get(
    "",
    response_model=list[AutismCenterResponse],
    summary="List centers near a point",
    description=(
        "Centers within ``radius`` km of (lat, lng), nearest first, with the "
        "distance in km rounded to two decimals. The radius boundary is "
        "inclusive; ``limit`` applies after the radius filter."
    ),
)
@limiter.limit(settings.rate_limit)
async def list_centers(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(settings.default_radius_km, gt=0),
    type: Optional[LocationType] = None,
    limit: int = Query(settings.default_limit, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    rows = await AutismCenterRepository(db).list_centers(type=type)
    centers = [row.to_entity() for row in rows]
    ranked = filter_centers_within_radius(Coordinate(lat, lng), centers, radius)
    logger.debug(
        "%d of %d centers within %.1f km", len(ranked), len(centers), radius
    )
    return [_with_distance(r) for r in ranked[:limit]]


@router.get(
    "/nearest",
    response_model=AutismCenterResponse,
    summary="Nearest center to a point",
)
@limiter.limit(settings.rate_limit)
async def nearest_center(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    type: Optional[LocationType] = None,
    db: AsyncSession = Depends(get_db),
):
    user = Coordinate(lat, lng)
    rows = await AutismCenterRepository(db).list_centers(type=type)
    centers = [row.to_entity() for row in rows]
    nearest = find_nearest_center(user, centers)
    if nearest is None:
        raise HTTPException(status_code=404, detail="No centers found")
    return _with_distance(Ranked(center=nearest, distance=distance_to(user, nearest)))


@router.get(
    "/search",
    response_model=list[AutismCenterResponse],
    summary="Search centers by name, address or description",
)
@limiter.limit(settings.rate_limit)
async def search_centers(
    request: Request,
    q: str = Query(..., min_length=1),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    return await AutismCenterRepository(db).search(q, limit=limit)


@router.get(
    "/stats",
    response_model=CenterStatsResponse,
    summary="Center counts by type and verification status",
)
@limiter.limit(settings.rate_limit)
async def center_stats(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    repo = AutismCenterRepository(db)
    by_type = {t.value: 0 for t in LocationType}
    by_type.update({t.value: n for t, n in (await repo.count_by_type()).items()})
    verified, unverified = await repo.count_verified()
    return CenterStatsResponse(
        total=sum(by_type.values()),
        by_type=by_type,
        verified=verified,
        unverified=unverified,
    )


@router.post(
    "",
    status_code=201,
    response_model=AutismCenterResponse,
    summary="Register a new center",
)
@limiter.limit(settings.rate_limit)
async def create_center(
    request: Request,
    body: CenterCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    center = await AutismCenterRepository(db).create_center(**body.model_dump())
    logger.info("Created center id=%s type=%s", center.id, center.type)
    return center
