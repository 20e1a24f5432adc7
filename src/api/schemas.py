"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.entities import Coordinate
from src.domain.enums import LocationType
from src.domain.navigation import NavigationRoute, RouteStep


# ── Shared ────────────────────────────────────────────────────────────


class CoordinateSchema(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    model_config = {"from_attributes": True}

    def to_domain(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


# ── Centers ───────────────────────────────────────────────────────────


class CenterCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    type: LocationType
    address: str = Field(..., min_length=1, max_length=500)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    phone: Optional[str] = Field(None, max_length=40)
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    services: list[str] = []
    age_groups: list[str] = []
    insurance_accepted: list[str] = []
    rating: Optional[float] = Field(None, ge=0, le=5)
    verified: bool = False


class AutismCenterResponse(BaseModel):
    id: int
    name: str
    type: LocationType
    address: str
    latitude: float
    longitude: float
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    services: list[str] = []
    age_groups: list[str] = []
    insurance_accepted: list[str] = []
    rating: Optional[float] = None
    verified: bool = False
    created_at: Optional[datetime] = None
    distance: Optional[float] = Field(
        None, description="Kilometers from the query point, when one was given."
    )

    model_config = {"from_attributes": True}


class CenterStatsResponse(BaseModel):
    total: int
    by_type: dict[str, int]
    verified: int
    unverified: int


# ── Navigation ────────────────────────────────────────────────────────


class RouteStepSchema(BaseModel):
    instruction: str
    distance: float
    duration: float
    maneuver: str
    coordinates: list[CoordinateSchema] = []
    direction: Optional[str] = None
    street: Optional[str] = None

    model_config = {"from_attributes": True}

    def to_domain(self) -> RouteStep:
        return RouteStep(
            instruction=self.instruction,
            distance=self.distance,
            duration=self.duration,
            maneuver=self.maneuver,
            coordinates=tuple(c.to_domain() for c in self.coordinates),
            direction=self.direction,
            street=self.street,
        )


class NavigationRouteSchema(BaseModel):
    steps: list[RouteStepSchema]
    total_distance: float
    total_duration: float
    coordinates: list[CoordinateSchema] = []
    summary: str = ""

    model_config = {"from_attributes": True}

    def to_domain(self) -> NavigationRoute:
        return NavigationRoute(
            steps=tuple(s.to_domain() for s in self.steps),
            total_distance=self.total_distance,
            total_duration=self.total_duration,
            coordinates=tuple(c.to_domain() for c in self.coordinates),
            summary=self.summary,
        )


class ProgressRequest(BaseModel):
    location: CoordinateSchema
    route: NavigationRouteSchema
    threshold_m: Optional[float] = Field(None, gt=0)


class ProgressResponse(BaseModel):
    step_index: int
    step: Optional[RouteStepSchema] = None
    off_route: bool
    voice_instruction: Optional[str] = None
    maneuver_icon: Optional[str] = None
    estimated_arrival: Optional[str] = Field(
        None, description="Clock time at the end of the route, e.g. ``01:15 PM``."
    )


# ── Geocoding ─────────────────────────────────────────────────────────


class GeocodeResultSchema(BaseModel):
    latitude: float
    longitude: float
    formatted: str
    housenumber: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None
    confidence: float = 0.0
    place_id: Optional[str] = None

    model_config = {"from_attributes": True}


class ReverseGeocodeSchema(BaseModel):
    address: str
    formatted: str
    street: Optional[str] = None
    housenumber: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None

    model_config = {"from_attributes": True}


# ── Misc ──────────────────────────────────────────────────────────────


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
