"""
Geoapify HTTP client (routing + geocoding).
===========================================

This module is the only place that reads Geoapify's GeoJSON payloads.
Geoapify orders points as ``[lon, lat]``; every pair is converted to a
``Coordinate`` inside the ``parse_*`` functions below.

Failure model
-------------
* ``InvalidCoordinatesError`` -- raised before any request is sent.
* ``GeoapifyError``           -- missing API key.
* ``RoutingError`` / ``GeocodingError`` -- non-2xx status, a body that is
  not JSON, or a transport failure.  No retry, no backoff; the caller
  decides.
* A response with zero features is a valid "nothing found" answer and
  yields ``None`` / ``[]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from src.domain.entities import Coordinate, validate_coordinate
from src.domain.enums import TravelMode
from src.domain.navigation import NavigationRoute, RouteStep, route_summary

logger = logging.getLogger(__name__)

MIN_AUTOCOMPLETE_LENGTH = 3


class GeoapifyError(Exception):
    """Base class for provider failures."""


class RoutingError(GeoapifyError):
    """The routing request failed (HTTP status or network)."""


class GeocodingError(GeoapifyError):
    """A geocoding request failed (HTTP status or network)."""


@dataclass(frozen=True)
class GeocodeResult:
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

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


@dataclass(frozen=True)
class ReverseGeocodeResult:
    address: str
    formatted: str
    street: Optional[str] = None
    housenumber: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None


def format_address(result: GeocodeResult | ReverseGeocodeResult) -> str:
    """``"12 Jalan Ampang, Kuala Lumpur, WP, 50450"`` style one-liner."""
    parts: list[str] = []
    if result.housenumber and result.street:
        parts.append(f"{result.housenumber} {result.street}")
    elif result.street:
        parts.append(result.street)
    for piece in (result.city, result.state, result.postcode):
        if piece:
            parts.append(piece)
    return ", ".join(parts)


# ── Payload parsing ───────────────────────────────────────────────────


def _flatten_lines(raw: Any) -> list[list[Coordinate]]:
    """Normalise LineString / MultiLineString coordinates to a list of legs."""
    if not raw:
        return []
    first = raw[0]
    if not first or isinstance(first[0], (list, tuple)):
        return [[Coordinate.from_lon_lat(p) for p in leg] for leg in raw]
    return [[Coordinate.from_lon_lat(p) for p in raw]]


def _parse_step(step: dict, leg_coords: list[Coordinate]) -> RouteStep:
    instruction = step.get("instruction") or {}
    geometry = (step.get("geometry") or {}).get("coordinates")
    if geometry:
        coords = tuple(Coordinate.from_lon_lat(p) for p in geometry)
    elif "from_index" in step and leg_coords:
        end = step.get("to_index", step["from_index"])
        coords = tuple(leg_coords[step["from_index"] : end + 1])
    else:
        coords = ()

    return RouteStep(
        instruction=instruction.get("text") or "Continue",
        distance=float(step.get("distance") or 0),
        duration=float(step.get("time") or 0),
        maneuver=instruction.get("type") or "straight",
        coordinates=coords,
        direction=instruction.get("modifier"),
        street=step.get("name"),
    )


def parse_route(payload: dict) -> Optional[NavigationRoute]:
    """Turn a Geoapify routing response into a ``NavigationRoute``.

    Returns ``None`` when the provider found no route.
    """
    features = payload.get("features") or []
    if not features:
        return None

    feature = features[0]
    properties = feature.get("properties") or {}
    legs_coords = _flatten_lines((feature.get("geometry") or {}).get("coordinates"))
    first_leg = legs_coords[0] if legs_coords else []

    legs = properties.get("legs") or []
    raw_steps = (legs[0].get("steps") or []) if legs else []
    steps = tuple(_parse_step(s, first_leg) for s in raw_steps)

    total_distance = float(properties.get("distance") or 0)
    total_duration = float(properties.get("time") or 0)
    return NavigationRoute(
        steps=steps,
        total_distance=total_distance,
        total_duration=total_duration,
        coordinates=tuple(c for leg in legs_coords for c in leg),
        summary=route_summary(total_distance, total_duration),
    )


def parse_geocode_features(payload: dict, fallback: str = "") -> list[GeocodeResult]:
    results: list[GeocodeResult] = []
    for feature in payload.get("features") or []:
        point = Coordinate.from_lon_lat(feature["geometry"]["coordinates"])
        props = feature.get("properties") or {}
        results.append(
            GeocodeResult(
                latitude=point.latitude,
                longitude=point.longitude,
                formatted=props.get("formatted") or props.get("address_line1") or fallback,
                housenumber=props.get("housenumber"),
                street=props.get("street"),
                city=props.get("city"),
                state=props.get("state"),
                country=props.get("country"),
                postcode=props.get("postcode"),
                confidence=float(
                    props.get("confidence")
                    or (props.get("rank") or {}).get("confidence")
                    or 0
                ),
                place_id=props.get("place_id"),
            )
        )
    return results


# ── Client ────────────────────────────────────────────────────────────


class GeoapifyClient:
    """Thin async wrapper; one instance per application (shared connection pool)."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.geoapify.com",
    ):
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def _require_key(self) -> None:
        if not self.api_key:
            raise GeoapifyError("Geoapify API key is not configured")

    async def _get(self, path: str, params: dict, error_cls: type[GeoapifyError]) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http.get(url, params={**params, "apiKey": self.api_key})
        except httpx.HTTPError as exc:
            raise error_cls(f"Request to {path} failed: {exc}") from exc

        if response.is_error:
            raise error_cls(
                f"{path} failed: {response.status_code} {response.reason_phrase}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise error_cls(f"{path} returned invalid JSON") from exc

    async def get_directions(
        self,
        origin: Coordinate,
        destination: Coordinate,
        mode: TravelMode = TravelMode.DRIVE,
    ) -> Optional[NavigationRoute]:
        validate_coordinate(origin, "from")
        validate_coordinate(destination, "to")
        self._require_key()

        mode = TravelMode(mode)
        waypoints = (
            f"{origin.latitude},{origin.longitude}"
            f"|{destination.latitude},{destination.longitude}"
        )
        logger.info("Routing request mode=%s waypoints=%s", mode.value, waypoints)

        payload = await self._get(
            "/v1/routing", {"waypoints": waypoints, "mode": mode.value}, RoutingError
        )
        route = parse_route(payload)
        if route is None:
            logger.info("No route found for waypoints=%s", waypoints)
        return route

    async def geocode_address(self, text: str) -> list[GeocodeResult]:
        if not text.strip():
            raise ValueError("Address is required")
        self._require_key()
        payload = await self._get("/v1/geocode/search", {"text": text}, GeocodingError)
        return parse_geocode_features(payload, fallback=text)

    async def reverse_geocode(self, point: Coordinate) -> Optional[ReverseGeocodeResult]:
        validate_coordinate(point, "point")
        self._require_key()
        payload = await self._get(
            "/v1/geocode/reverse",
            {"lat": point.latitude, "lon": point.longitude},
            GeocodingError,
        )
        features = payload.get("features") or []
        if not features:
            return None

        props = features[0].get("properties") or {}
        formatted = props.get("formatted") or props.get("address_line1") or "Unknown address"
        return ReverseGeocodeResult(
            address=props.get("address_line1") or formatted,
            formatted=formatted,
            street=props.get("street"),
            housenumber=props.get("housenumber"),
            city=props.get("city"),
            state=props.get("state"),
            country=props.get("country"),
            postcode=props.get("postcode"),
        )

    async def autocomplete(
        self, text: str, bias: Optional[Coordinate] = None
    ) -> list[GeocodeResult]:
        if len(text) < MIN_AUTOCOMPLETE_LENGTH:
            return []
        self._require_key()

        params: dict[str, Any] = {"text": text}
        if bias is not None:
            lon, lat = bias.to_lon_lat()
            params["bias"] = f"proximity:{lon},{lat}"
        payload = await self._get("/v1/geocode/autocomplete", params, GeocodingError)
        return parse_geocode_features(payload, fallback=text)
