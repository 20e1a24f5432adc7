"""
Distance calculation using the Haversine formula.

Great-circle distance on a spherical Earth (R = 6371 km).  Every other
geospatial helper in the project is built on top of ``haversine_km``.

No input validation is performed here: NaN in, NaN out.  Range checks live
at the edges (request schemas and the routing client).

Complexity: O(1) per call.
"""

import math

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def haversine_m(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """Same as :func:`haversine_km` but in **meters**."""
    return haversine_km(lat1, lon1, lat2, lon2) * 1000.0
