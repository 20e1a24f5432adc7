"""Domain enumerations."""

import enum


class LocationType(str, enum.Enum):
    DIAGNOSTIC = "diagnostic"
    THERAPY = "therapy"
    SUPPORT = "support"
    EDUCATION = "education"


class TravelMode(str, enum.Enum):
    DRIVE = "drive"
    WALK = "walk"
    BICYCLE = "bicycle"


class GeolocationErrorCode(int, enum.Enum):
    """W3C ``GeolocationPositionError`` codes."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


# User-facing text for each geolocation failure
GEOLOCATION_MESSAGES: dict[GeolocationErrorCode, str] = {
    GeolocationErrorCode.PERMISSION_DENIED: (
        "Location access denied. Please enable location services."
    ),
    GeolocationErrorCode.POSITION_UNAVAILABLE: (
        "Location information is unavailable."
    ),
    GeolocationErrorCode.TIMEOUT: "Location request timed out.",
}

DEFAULT_GEOLOCATION_MESSAGE = "Failed to get your location"
