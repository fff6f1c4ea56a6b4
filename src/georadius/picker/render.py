"""
Render collaborator interface and a GeoJSON backend.

Every map backend implements the same small capability set: draw the radius circle,
place the two draggable markers, move the view. Backends feed pointer events back
through `InteractionController` (`on_map_click`, `on_center_drag_end`,
`on_handle_drag_start`, `on_handle_drag`, `on_handle_drag_end`).
"""

from __future__ import annotations

from typing import Any, Protocol

from georadius.core.geo import Coordinate, circle_polygon


class MapRenderer(Protocol):
    def draw_circle(self, center: Coordinate, radius_m: float) -> None: ...

    def place_center_marker(self, coord: Coordinate) -> None: ...

    def place_handle_marker(self, coord: Coordinate) -> None: ...

    def focus(self, coord: Coordinate, zoom: int | None = None) -> None: ...


def _lon_lat(coord: Coordinate) -> list[float]:
    # GeoJSON positions are [longitude, latitude].
    return [coord.longitude, coord.latitude]


def _continuous_ring(center: Coordinate, ring: list[Coordinate]) -> list[list[float]]:
    """Unwrap ring longitudes relative to the center.

    A circle crossing the antimeridian keeps consecutive vertices adjacent, so
    longitudes may leave [-180, 180] (180.03 next to 179.95, say). Web maps draw
    such rings as one small patch instead of a band around the globe.
    """
    positions: list[list[float]] = []
    for coord in ring:
        lon = coord.longitude
        delta = lon - center.longitude
        if delta > 180.0:
            lon -= 360.0
        elif delta < -180.0:
            lon += 360.0
        positions.append([lon, coord.latitude])
    return positions


class GeoJsonRenderer:
    """Keeps the current scene as GeoJSON for web frontends (Leaflet, MapLibre, deck.gl)."""

    def __init__(self, *, point_count: int = 64):
        self._point_count = point_count
        self._ring: list[list[float]] | None = None
        self._radius_m: float | None = None
        self._center: Coordinate | None = None
        self._handle: Coordinate | None = None
        self._view: dict[str, Any] | None = None
        self.circle_draws = 0

    def draw_circle(self, center: Coordinate, radius_m: float) -> None:
        self._ring = _continuous_ring(center, circle_polygon(center, radius_m, self._point_count))
        self._radius_m = radius_m
        self.circle_draws += 1

    def place_center_marker(self, coord: Coordinate) -> None:
        self._center = coord

    def place_handle_marker(self, coord: Coordinate) -> None:
        self._handle = coord

    def focus(self, coord: Coordinate, zoom: int | None = None) -> None:
        self._view = {"center": _lon_lat(coord), "zoom": zoom}

    @property
    def view(self) -> dict[str, Any] | None:
        return self._view

    def feature_collection(self) -> dict[str, Any]:
        """Return the scene as a GeoJSON FeatureCollection."""
        features: list[dict[str, Any]] = []
        if self._ring is not None:
            features.append(
                {
                    "type": "Feature",
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [self._ring],
                    },
                    "properties": {"role": "radius", "radius_m": self._radius_m},
                }
            )
        for role, coord in (("center", self._center), ("handle", self._handle)):
            if coord is None:
                continue
            features.append(
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": _lon_lat(coord)},
                    "properties": {"role": role, "draggable": True},
                }
            )
        return {"type": "FeatureCollection", "features": features}
