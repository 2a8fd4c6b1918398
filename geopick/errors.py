"""Exception hierarchy shared across the location picker."""
from __future__ import annotations


class GeopickError(Exception):
    """Base class for all location picker errors."""


class ResolutionFailure(GeopickError):
    """The reverse-geocoding lookup failed outright (transport, status or parse)."""


class GeolocationError(GeopickError):
    """The device position could not be obtained."""

    notice = "Unable to retrieve your location"


class GeolocationUnsupported(GeolocationError):
    notice = "Geolocation is not supported by this device"


class PermissionDenied(GeolocationError):
    notice = "Location access was denied"


class PositionUnavailable(GeolocationError):
    notice = "Your position is currently unavailable"


class GeolocationTimeout(GeolocationError):
    notice = "Timed out while retrieving your location"


class ViewportError(GeopickError):
    """Invalid use of a map viewport."""


class ViewportReleased(ViewportError):
    """The viewport handle was used after teardown."""
