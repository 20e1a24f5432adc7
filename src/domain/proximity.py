"""
Nearest / sort / filter helpers over center-like records.
==========================================================

Any object exposing ``latitude`` and ``longitude`` attributes qualifies
(ORM rows, dataclasses, pydantic models); no base class is required.

Malformed records
-----------------
A record whose coordinates yield a NaN distance is treated as infinitely
far away: it is ranked last by ``sort_centers_by_distance`` (keeping its
relative input order), dropped by ``filter_centers_within_radius`` and
never preferred by ``find_nearest_center`` over a well-formed record.

Complexity
----------
* ``find_nearest_center``          O(n)
* ``sort_centers_by_distance``     O(n log n)
* ``filter_centers_within_radius`` O(n log n)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Iterable, Optional, Protocol, Sequence, TypeVar

from .distance import haversine_km
from .entities import Coordinate


class HasCoordinates(Protocol):
    latitude: float
    longitude: float


T = TypeVar("T", bound=HasCoordinates)


@dataclass(frozen=True)
class Ranked(Generic[T]):
    """A center paired with its distance (km) from the user."""

    center: T
    distance: float

    @property
    def latitude(self) -> float:
        return self.center.latitude

    @property
    def longitude(self) -> float:
        return self.center.longitude


def distance_to(user: Coordinate, center: HasCoordinates) -> float:
    return haversine_km(
        user.latitude, user.longitude, center.latitude, center.longitude
    )


def _sort_key(ranked: Ranked) -> float:
    return math.inf if math.isnan(ranked.distance) else ranked.distance


def find_nearest_center(user: Coordinate, centers: Sequence[T]) -> Optional[T]:
    """Return the center closest to *user*, or ``None`` for an empty list.

    Ties resolve to the first-encountered center.
    """
    if not centers:
        return None

    nearest = centers[0]
    shortest = distance_to(user, nearest)
    for center in centers[1:]:
        d = distance_to(user, center)
        if d < shortest or (math.isnan(shortest) and not math.isnan(d)):
            shortest = d
            nearest = center
    return nearest


def rank_centers(user: Coordinate, centers: Iterable[T]) -> list[Ranked[T]]:
    """Attach distances without reordering."""
    return [Ranked(center=c, distance=distance_to(user, c)) for c in centers]


def sort_centers_by_distance(
    user: Coordinate, centers: Iterable[T]
) -> list[Ranked[T]]:
    """Every center with its distance, ascending.  Input is not mutated."""
    return sorted(rank_centers(user, centers), key=_sort_key)


def filter_centers_within_radius(
    user: Coordinate, centers: Iterable[T], radius_km: float
) -> list[Ranked[T]]:
    """Centers with ``distance <= radius_km`` (inclusive), ascending."""
    within = [r for r in rank_centers(user, centers) if r.distance <= radius_km]
    return sorted(within, key=_sort_key)
