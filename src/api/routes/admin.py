"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- liveness plus whether routing is configured
"""

from fastapi import APIRouter

from src.api.schemas import HealthResponse
from src.config import settings

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    if not settings.geoapify_api_key:
        return HealthResponse(status="degraded")
    return HealthResponse()
