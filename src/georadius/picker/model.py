"""
Radius model: the single owned selection state.

`Selection` is the only mutable state in the picker. The handle position and the
render polygon are recomputed from it on every read, so the circle and the handle
cannot drift apart during rapid drags.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from georadius.config.settings import PickerSettings
from georadius.core.geo import (
    Coordinate,
    circle_polygon,
    coordinates_close,
    destination,
    distance,
    normalize_coordinate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """A center point plus a radius in meters."""

    center: Coordinate
    radius_m: float


def clamp_radius(meters: float, min_radius_m: float, max_radius_m: float) -> float:
    """Clamp `meters` into [min_radius_m, max_radius_m].

    Non-finite input is clamped too: NaN and -inf land on the minimum, +inf on the
    maximum.
    """
    if math.isnan(meters):
        return float(min_radius_m)
    return float(max(min_radius_m, min(max_radius_m, meters)))


def format_readout(selection: Selection) -> dict[str, str]:
    """Display strings for the numeric panel (coordinates and radius in km)."""
    return {
        "latitude": f"{selection.center.latitude:.6f}",
        "longitude": f"{selection.center.longitude:.6f}",
        "radius": f"{selection.radius_m / 1000:.2f} km",
    }


class RadiusModel:
    """Owns one `Selection` and derives handle/polygon from it."""

    def __init__(
        self,
        settings: PickerSettings,
        *,
        center: Coordinate | None = None,
        radius_m: float | None = None,
    ):
        self._settings = settings
        if center is None:
            center = Coordinate(
                latitude=settings.default_center.latitude,
                longitude=settings.default_center.longitude,
            )
        if radius_m is None:
            radius_m = settings.default_radius_m
        self._selection = Selection(center=normalize_coordinate(center), radius_m=self._clamp(radius_m))

    @property
    def settings(self) -> PickerSettings:
        return self._settings

    @property
    def center(self) -> Coordinate:
        return self._selection.center

    @property
    def radius_m(self) -> float:
        return self._selection.radius_m

    def _clamp(self, meters: float) -> float:
        return clamp_radius(meters, self._settings.min_radius_m, self._settings.max_radius_m)

    def set_center(self, coord: Coordinate) -> bool:
        """Move the center, keeping the radius. Returns False for a no-op move.

        Longitudes outside [-180, 180] are wrapped; an invalid latitude raises ValueError.
        """
        coord = normalize_coordinate(coord)
        if coordinates_close(coord, self._selection.center, self._settings.center_epsilon_m):
            return False
        self._selection = Selection(center=coord, radius_m=self._selection.radius_m)
        return True

    def set_radius(self, meters: float) -> float:
        """Clamp and apply a radius, keeping the center. Returns the applied value."""
        clamped = self._clamp(meters)
        if clamped != meters:
            logger.debug("Radius %s clamped to %s", meters, clamped)
        self._selection = Selection(center=self._selection.center, radius_m=clamped)
        return clamped

    def set_radius_from_handle_drag(self, handle: Coordinate) -> float:
        """Apply the handle's distance from the center as the new radius.

        Only the distance is honored; the bearing of the pointer is ignored.
        """
        return self.set_radius(distance(self._selection.center, handle))

    def derived_handle_position(self) -> Coordinate:
        return destination(
            self._selection.center,
            self._selection.radius_m,
            self._settings.handle_bearing_deg,
        )

    def derived_polygon(self) -> list[Coordinate]:
        return circle_polygon(
            self._selection.center,
            self._selection.radius_m,
            self._settings.circle_polygon_points,
        )

    def snapshot(self) -> Selection:
        return self._selection

    def readout(self) -> dict[str, str]:
        return format_readout(self._selection)
