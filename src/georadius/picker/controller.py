"""
Interaction controller.

Translates backend-agnostic pointer events into `RadiusModel` mutations:
- a radius-handle drag only ever changes the radius,
- a map click / center drag only ever moves the center,
- map clicks are ignored while the radius handle is being dragged.

The model is updated synchronously on every event so numeric readouts stay live;
only the vector-circle repaint is debounced (`picker.handle_debounce_ms`).

Address lookups and device location are terminal actions that end in `set_center`.
Each lookup takes a generation token; a result arriving after a newer lookup or a
manual center move is discarded.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from georadius.core.debounce import Debouncer
from georadius.core.errors import GeocodeError, GeolocationUnavailable
from georadius.core.geo import Coordinate, normalize_coordinate
from georadius.domain.models import MIN_ADDRESS_LENGTH, GeocodeRequest
from georadius.ingestion.geocoder import Geocoder
from georadius.picker.model import RadiusModel, Selection
from georadius.picker.notify import LoggingNotifier, Notifier
from georadius.picker.render import MapRenderer

logger = logging.getLogger(__name__)


class DeviceLocator(Protocol):
    async def locate(self) -> Coordinate | None: ...


def _valid_or_none(coord: object) -> Coordinate | None:
    # Lookups from pluggable collaborators are treated as "no coordinate" when unusable.
    if not isinstance(coord, Coordinate):
        return None
    try:
        return normalize_coordinate(coord)
    except ValueError as exc:
        logger.warning("Ignoring unusable coordinate: %s", str(exc))
        return None


class InteractionController:
    """Drag/click state machine over one flag: `radius_drag_active`."""

    def __init__(
        self,
        model: RadiusModel,
        renderer: MapRenderer,
        *,
        geocoder: Geocoder | None = None,
        notifier: Notifier | None = None,
    ):
        self._model = model
        self._renderer = renderer
        self._geocoder = geocoder
        self._notifier = notifier or LoggingNotifier()
        self._settings = model.settings

        self._radius_drag_active = False
        self._handle_position = model.derived_handle_position()
        self._geocode_generation = 0
        self._circle_repaint = Debouncer(
            delay_seconds=self._settings.handle_debounce_ms / 1000.0,
            callback=self._paint_circle,
        )

    @property
    def model(self) -> RadiusModel:
        return self._model

    @property
    def radius_drag_active(self) -> bool:
        return self._radius_drag_active

    @property
    def handle_position(self) -> Coordinate:
        """Where the handle is displayed (the pointer while dragging)."""
        return self._handle_position

    @property
    def repaint_pending(self) -> bool:
        return self._circle_repaint.pending

    def selection(self) -> Selection:
        return self._model.snapshot()

    def readout(self) -> dict[str, str]:
        return self._model.readout()

    # Rendering

    def mount(self) -> None:
        """Draw the initial scene and set the initial view."""
        self.render()
        self._renderer.focus(self._model.center, self._settings.initial_zoom)

    def render(self) -> None:
        """Repaint circle and both markers from the current selection."""
        self._paint_circle()
        self._renderer.place_center_marker(self._model.center)
        if not self._radius_drag_active:
            self._handle_position = self._model.derived_handle_position()
        self._renderer.place_handle_marker(self._handle_position)

    def poll(self) -> bool:
        """Run a due debounced repaint (for hosts without an asyncio loop)."""
        return self._circle_repaint.poll()

    def close(self) -> None:
        self._circle_repaint.cancel()

    def _paint_circle(self) -> None:
        self._renderer.draw_circle(self._model.center, self._model.radius_m)

    def _snap_handle(self) -> None:
        self._handle_position = self._model.derived_handle_position()
        self._renderer.place_handle_marker(self._handle_position)

    # Center

    def _move_center(
        self,
        coord: Coordinate,
        *,
        zoom: int | None = None,
        invalidate_lookups: bool = True,
    ) -> bool:
        if invalidate_lookups:
            self._geocode_generation += 1
        changed = self._model.set_center(coord)
        if changed:
            # A full repaint supersedes any pending radius-only repaint.
            self._circle_repaint.cancel()
            self.render()
        if changed or zoom is not None:
            self._renderer.focus(self._model.center, zoom)
        return changed

    def on_map_click(self, coord: Coordinate) -> bool:
        """Move the center to a clicked point (ignored while dragging the handle)."""
        if self._radius_drag_active:
            logger.debug("Ignoring map click during radius drag")
            return False
        return self._move_center(coord)

    def on_center_drag_end(self, coord: Coordinate) -> bool:
        return self._move_center(coord)

    def recenter(self, coord: Coordinate, zoom: int | None = None) -> bool:
        return self._move_center(coord, zoom=zoom)

    # Radius

    def set_radius(self, meters: float) -> float:
        """Programmatic/slider radius change; returns the clamped value."""
        applied = self._model.set_radius(meters)
        if not self._radius_drag_active:
            self._snap_handle()
        self._circle_repaint.trigger()
        return applied

    def on_handle_drag_start(self, coord: Coordinate | None = None) -> None:
        self._radius_drag_active = True
        if coord is not None:
            self._handle_position = coord

    def on_handle_drag(self, coord: Coordinate) -> float:
        """Apply the pointer's distance from the center; the handle follows the pointer."""
        if not self._radius_drag_active:
            self.on_handle_drag_start(coord)
        applied = self._model.set_radius_from_handle_drag(coord)
        self._handle_position = coord
        self._renderer.place_handle_marker(coord)
        self._circle_repaint.trigger()
        return applied

    def on_handle_drag_end(self, coord: Coordinate | None = None) -> float:
        """Finish the drag: final radius, immediate repaint, handle snaps to bearing."""
        if coord is not None:
            self._model.set_radius_from_handle_drag(coord)
            self._circle_repaint.trigger()
        self._radius_drag_active = False
        self._circle_repaint.flush()
        self._snap_handle()
        return self._model.radius_m

    # Lookups

    async def submit_address(self, address: str) -> Coordinate | None:
        """Geocode `address` and move the center there.

        Returns the new center, or None when the input is invalid, the lookup failed,
        or the result went stale. The selection is untouched in every None case.
        """
        try:
            request = GeocodeRequest(address=address)
        except ValidationError:
            self._notifier.error(
                "Invalid Address",
                f"Address must be at least {MIN_ADDRESS_LENGTH} characters long.",
            )
            return None

        if self._geocoder is None:
            self._notifier.error("Geocoding Error", "Address search is not available.")
            return None

        self._geocode_generation += 1
        token = self._geocode_generation

        try:
            coord = await self._geocoder.geocode(request.address)
        except GeocodeError as exc:
            logger.info("Geocode failed for %r: %s", request.address, str(exc))
            coord = None
        except Exception as exc:
            logger.warning("Geocoder raised unexpectedly for %r: %s", request.address, str(exc))
            coord = None

        if token != self._geocode_generation:
            logger.info("Discarding stale geocode result for %r", request.address)
            return None

        coord = _valid_or_none(coord)
        if coord is None:
            self._notifier.error(
                "Geocoding Error",
                "Failed to find the specified address. Please try again.",
            )
            return None

        self._move_center(coord, zoom=self._settings.geocode_zoom, invalidate_lookups=False)
        self._notifier.info("Location Found", f"Map centered on {request.address}.")
        return coord

    async def locate_device(self, locator: DeviceLocator | None = None) -> Coordinate:
        """Center on the device location, or on the default center if unavailable."""
        coord: Coordinate | None = None
        if locator is not None:
            try:
                coord = await locator.locate()
            except GeolocationUnavailable as exc:
                logger.info("Device location unavailable: %s", str(exc))
            except Exception:
                logger.warning("Device locator failed; using default center.", exc_info=True)
            coord = _valid_or_none(coord)

        if coord is None:
            default = self._settings.default_center
            coord = Coordinate(latitude=default.latitude, longitude=default.longitude)
            self._move_center(coord, zoom=self._settings.initial_zoom)
            return coord

        self._move_center(coord, zoom=self._settings.locate_zoom)
        return coord
