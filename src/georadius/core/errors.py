"""
Error kinds raised at the picker's collaborator boundaries.

None of these are fatal: the controller and confirmation flow catch them, leave the
selection untouched and surface a notice. Out-of-range radius input is clamped
rather than raised, so it has no error type here.
"""

from __future__ import annotations


class GeoRadiusError(Exception):
    """Base class for recoverable picker errors."""


class GeocodeError(GeoRadiusError):
    """The address could not be turned into a coordinate."""


class GeocodeNotFound(GeocodeError):
    """The lookup succeeded but matched nothing usable."""


class GeocodeUnavailable(GeocodeError):
    """The upstream lookup failed (transport error, non-2xx, bad payload)."""


class GeolocationUnavailable(GeoRadiusError):
    """Device location was denied or is not supported by the host."""


class ClipboardWriteFailed(GeoRadiusError):
    """The host refused to write to the clipboard."""
