"""
Domain value objects and entities.

* ``Coordinate`` is the one canonical point representation inside the
  project: named ``latitude`` / ``longitude`` fields in decimal degrees.
  Provider-native ``[lon, lat]`` pairs are converted with
  ``Coordinate.from_lon_lat`` at the parsing boundary and never travel
  further.
* ``AutismCenter`` is a read-only listing as seen by the geospatial helpers;
  ORM rows are converted with ``AutismCenterModel.to_entity``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from .enums import (
    DEFAULT_GEOLOCATION_MESSAGE,
    GEOLOCATION_MESSAGES,
    GeolocationErrorCode,
    LocationType,
)


class InvalidCoordinatesError(ValueError):
    """Raised when a point is non-numeric, NaN or outside the valid range."""


class GeolocationError(Exception):
    """Raised by a location provider when the device position is unavailable."""

    def __init__(self, code: int, detail: str | None = None):
        self.code = code
        self.detail = detail
        super().__init__(detail or self.user_message)

    @property
    def user_message(self) -> str:
        try:
            return GEOLOCATION_MESSAGES[GeolocationErrorCode(self.code)]
        except ValueError:
            return DEFAULT_GEOLOCATION_MESSAGE


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    @classmethod
    def from_lon_lat(cls, pair: Sequence[float]) -> "Coordinate":
        """Build from a GeoJSON-style ``[lon, lat]`` pair."""
        return cls(latitude=float(pair[1]), longitude=float(pair[0]))

    def to_lon_lat(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    def is_valid(self) -> bool:
        return _is_valid_number(self.latitude, -90, 90) and _is_valid_number(
            self.longitude, -180, 180
        )


def _is_valid_number(value: Any, low: float, high: float) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if math.isnan(value):
        return False
    return low <= value <= high


def validate_coordinate(coord: Coordinate, label: str) -> Coordinate:
    """Return *coord* unchanged or raise ``InvalidCoordinatesError``."""
    if not coord.is_valid():
        raise InvalidCoordinatesError(
            f"Invalid '{label}' coordinates: "
            f"latitude={coord.latitude!r}, longitude={coord.longitude!r}"
        )
    return coord


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class AutismCenter:
    name: str
    type: LocationType
    address: str
    latitude: float
    longitude: float
    id: Optional[int] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    services: list[str] = field(default_factory=list)
    age_groups: list[str] = field(default_factory=list)
    insurance_accepted: list[str] = field(default_factory=list)
    rating: Optional[float] = None
    verified: bool = False
    created_at: Optional[datetime] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)
