"""
Turn-by-turn navigation model and live-tracking helpers.
=========================================================

``NavigationRoute`` / ``RouteStep`` are built once by the routing client
and never mutated.  All coordinates are ``Coordinate`` objects; the
provider's ``[lon, lat]`` ordering never reaches this module.

Approximations
--------------
* ``is_off_route`` measures the distance to the nearest polyline *vertex*,
  not to the nearest point on a segment.  On long straight segments with
  sparse vertices a user standing on the road can be reported off-route.
* ``get_current_step`` compares the user against the *first* coordinate of
  each step only.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional, Sequence

from .distance import haversine_m
from .entities import Coordinate


@dataclass(frozen=True)
class RouteStep:
    instruction: str
    distance: float  # meters
    duration: float  # seconds
    maneuver: str
    coordinates: tuple[Coordinate, ...] = ()
    direction: Optional[str] = None
    street: Optional[str] = None


@dataclass(frozen=True)
class NavigationRoute:
    steps: tuple[RouteStep, ...]
    total_distance: float  # meters
    total_duration: float  # seconds
    coordinates: tuple[Coordinate, ...] = ()
    summary: str = field(default="")


@dataclass(frozen=True)
class CurrentStep:
    step_index: int
    step: Optional[RouteStep]


# ── Formatting ────────────────────────────────────────────────────────


def format_distance(meters: float) -> str:
    """``450 m`` below one kilometer, ``1.4 km`` from there on."""
    if meters < 1000:
        return f"{math.floor(meters + 0.5)} m"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    """``1h 5m`` when at least an hour, otherwise ``5m``.  Minutes floor."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def route_summary(total_distance: float, total_duration: float) -> str:
    return f"{format_distance(total_distance)} • {format_duration(total_duration)}"


_MANEUVER_ICONS = {
    "depart": "🚗",
    "arrive": "🏁",
    "straight": "⬆️",
    "continue": "⬆️",
    "merge": "🔀",
    "on-ramp": "🛣️",
    "off-ramp": "🛤️",
    "fork": "🍴",
    "roundabout": "🔄",
    "rotary": "🔄",
    "roundabout-turn": "🔄",
    "notification": "ℹ️",
    "new-name": "📍",
}
_TURN_ICONS = {
    "turn": {"left": "⬅️", "right": "➡️"},
    "sharp-turn": {"left": "↖️", "right": "↗️"},
    "slight-turn": {"left": "↖️", "right": "↗️"},
}
_DEFAULT_ICON = "➡️"


def get_maneuver_icon(maneuver: str, direction: Optional[str] = None) -> str:
    if maneuver in _TURN_ICONS:
        return _TURN_ICONS[maneuver].get(direction or "", "↗️")
    return _MANEUVER_ICONS.get(maneuver, _DEFAULT_ICON)


_HTML_TAG = re.compile(r"<[^>]+>")
_UNIT_WORD = re.compile(r"\b(m|km|ft|mi)\b")


def get_voice_instruction(step: RouteStep) -> str:
    """Text-to-speech friendly instruction, e.g. ``In 450 m, Turn left``."""
    text = _HTML_TAG.sub("", step.instruction)
    text = " ".join(_UNIT_WORD.sub("", text).split())
    return f"In {format_distance(step.distance)}, {text}"


def get_estimated_arrival(
    duration_seconds: float, now: Optional[datetime] = None
) -> str:
    arrival = (now or datetime.now()) + timedelta(seconds=duration_seconds)
    return arrival.strftime("%I:%M %p")


# ── Live tracking ─────────────────────────────────────────────────────


def is_off_route(
    user: Coordinate,
    route_coordinates: Sequence[Coordinate],
    threshold_m: float = 50.0,
) -> bool:
    """True iff every polyline vertex is farther than *threshold_m*.

    An empty polyline is never considered off-route.
    """
    if not route_coordinates:
        return False

    nearest = min(
        haversine_m(user.latitude, user.longitude, c.latitude, c.longitude)
        for c in route_coordinates
    )
    return nearest > threshold_m


def get_current_step(user: Coordinate, route: NavigationRoute) -> CurrentStep:
    """Index of the step whose start point is nearest to *user*.

    Steps without geometry are skipped; ties resolve to the lowest index.
    Returns ``CurrentStep(-1, None)`` for a route with no steps.
    """
    if not route.steps:
        return CurrentStep(step_index=-1, step=None)

    best_index = 0
    best_distance = math.inf
    for index, step in enumerate(route.steps):
        if not step.coordinates:
            continue
        start = step.coordinates[0]
        d = haversine_m(user.latitude, user.longitude, start.latitude, start.longitude)
        if d < best_distance:
            best_distance = d
            best_index = index

    return CurrentStep(step_index=best_index, step=route.steps[best_index])
