"""
Geospatial helpers.

A tiny spherical geometry layer: great-circle distance, destination point and a
circle-approximating polygon. Everything here is pure; the picker state lives in
`georadius.picker.model`.

Radius values always go through the exact haversine/destination formulas. The
polygon is only a rendering projection of (center, radius).
"""

from __future__ import annotations

from dataclasses import dataclass
from math import asin, atan2, cos, degrees, isfinite, radians, sin, sqrt

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into [-180, 180)."""
    wrapped = (lon + 180.0) % 360.0 - 180.0
    # Keep an exact +180 input as-is; both ends denote the antimeridian.
    if wrapped == -180.0 and lon > 0:
        return 180.0
    return wrapped


def normalize_bearing(bearing_deg: float) -> float:
    """Wrap a compass bearing into [0, 360)."""
    return bearing_deg % 360.0


def _clamp_latitude(lat: float) -> float:
    return max(-90.0, min(90.0, lat))


def normalize_coordinate(coord: Coordinate) -> Coordinate:
    """Return `coord` with its longitude wrapped into range.

    Raises ValueError for non-finite values or a latitude outside [-90, 90].
    """
    if not (isfinite(coord.latitude) and isfinite(coord.longitude)):
        raise ValueError(f"coordinate must be finite: {coord}")
    if not -90.0 <= coord.latitude <= 90.0:
        raise ValueError(f"latitude out of range: {coord.latitude}")
    longitude = normalize_longitude(coord.longitude)
    if longitude == coord.longitude:
        return coord
    return Coordinate(latitude=coord.latitude, longitude=longitude)


def distance(a: Coordinate, b: Coordinate) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push `h` a hair above 1 for antipodal points.
    return 2 * EARTH_RADIUS_M * asin(sqrt(min(1.0, h)))


def destination(origin: Coordinate, distance_m: float, bearing_deg: float) -> Coordinate:
    """Return the point reached from `origin` after `distance_m` along `bearing_deg`.

    Bearings are clockwise from north (0 = north, 90 = east) and may be any real
    number. The resulting longitude is wrapped across the antimeridian. A distance
    large enough to pass over a pole still yields a valid (if visually distorted)
    coordinate.
    """
    lat1 = radians(origin.latitude)
    lon1 = radians(origin.longitude)
    brng = radians(normalize_bearing(bearing_deg))
    delta = distance_m / EARTH_RADIUS_M

    sin_lat2 = sin(lat1) * cos(delta) + cos(lat1) * sin(delta) * cos(brng)
    lat2 = asin(max(-1.0, min(1.0, sin_lat2)))
    lon2 = lon1 + atan2(
        sin(brng) * sin(delta) * cos(lat1),
        cos(delta) - sin(lat1) * sin(lat2),
    )

    return Coordinate(
        latitude=_clamp_latitude(degrees(lat2)),
        longitude=normalize_longitude(degrees(lon2)),
    )


def circle_polygon(center: Coordinate, radius_m: float, point_count: int = 64) -> list[Coordinate]:
    """Approximate a circle as a closed ring of `point_count + 1` coordinates.

    Vertices sit at evenly spaced bearings over [0, 360), starting due north; the
    first vertex is repeated at the end to close the ring.
    """
    if point_count < 3:
        raise ValueError("point_count must be >= 3")

    step = 360.0 / point_count
    ring = [destination(center, radius_m, i * step) for i in range(point_count)]
    ring.append(ring[0])
    return ring


def coordinates_close(a: Coordinate, b: Coordinate, tolerance_m: float = 0.01) -> bool:
    """Return True when `a` and `b` are within `tolerance_m` meters of each other."""
    return distance(a, b) <= tolerance_m
