"""
API routes.

Endpoints:
- GET  `/api/settings`: public picker + deep-link settings for the web UI.
- POST `/api/selection`: clamp a selection and return handle, readout and GeoJSON scene.
- POST `/api/selection/handle`: radius from a dragged handle position.
- POST `/api/geocode`: address -> coordinate.
- POST `/api/confirm`: rounded result + deep link for a selection.

Each request builds a fresh `RadiusModel`; nothing is stored between requests.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, HTTPException

from georadius.config.overrides import apply_settings_overrides
from georadius.config.settings import Settings, get_settings
from georadius.core.errors import GeocodeNotFound, GeocodeUnavailable
from georadius.domain.models import (
    ConfirmationResult,
    GeocodeRequest,
    GeocodeResponse,
    GeoPoint,
    HandleDragPayload,
    SelectionPayload,
)
from georadius.ingestion.geocoder import Geocoder, NominatimGeocoder
from georadius.picker.confirmation import build_confirmation_result
from georadius.picker.controller import InteractionController
from georadius.picker.model import RadiusModel
from georadius.picker.render import GeoJsonRenderer

router = APIRouter()


@lru_cache
def _geocoder() -> Geocoder:
    return NominatimGeocoder(get_settings())


def _request_settings(overrides: dict[str, Any] | None) -> Settings:
    try:
        return apply_settings_overrides(get_settings(), overrides)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e


def _scene(model: RadiusModel, settings: Settings) -> dict:
    renderer = GeoJsonRenderer(point_count=settings.picker.circle_polygon_points)
    controller = InteractionController(model, renderer)
    controller.render()
    selection = model.snapshot()
    return {
        "selection": {
            "center": GeoPoint.from_coordinate(selection.center).model_dump(),
            "radius_m": selection.radius_m,
        },
        "handle": GeoPoint.from_coordinate(controller.handle_position).model_dump(),
        "readout": model.readout(),
        "geojson": renderer.feature_collection(),
    }


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return safe-to-expose settings for UI defaults (geocoder config removed)."""
    settings = get_settings()
    return {
        "picker": settings.picker.model_dump(mode="json"),
        "deep_link": settings.deep_link.model_dump(mode="json"),
    }


@router.post("/api/selection")
def post_selection(payload: SelectionPayload) -> dict:
    """Clamp the radius and return the derived scene for a selection."""
    settings = _request_settings(payload.settings_overrides)
    model = RadiusModel(settings.picker, center=payload.center.to_coordinate(), radius_m=payload.radius_m)
    return _scene(model, settings)


@router.post("/api/selection/handle")
def post_selection_handle(payload: HandleDragPayload) -> dict:
    """Apply a handle drag: only the distance from the center is honored."""
    settings = _request_settings(payload.settings_overrides)
    model = RadiusModel(settings.picker, center=payload.center.to_coordinate())
    model.set_radius_from_handle_drag(payload.handle.to_coordinate())
    return _scene(model, settings)


@router.post("/api/geocode", response_model=GeocodeResponse)
async def post_geocode(request: GeocodeRequest) -> GeocodeResponse:
    """Resolve an address; 404 when nothing matches, 502 when the upstream fails."""
    try:
        coord = await _geocoder().geocode(request.address)
    except GeocodeNotFound as e:
        raise HTTPException(
            status_code=404,
            detail={"code": "GEOCODE_NOT_FOUND", "message": str(e)},
        ) from e
    except GeocodeUnavailable as e:
        raise HTTPException(
            status_code=502,
            detail={"code": "GEOCODE_UNAVAILABLE", "message": str(e)},
        ) from e
    return GeocodeResponse(address=request.address, latitude=coord.latitude, longitude=coord.longitude)


@router.post("/api/confirm", response_model=ConfirmationResult)
def post_confirm(payload: SelectionPayload) -> ConfirmationResult:
    """Round the (clamped) selection and build its deep link."""
    settings = _request_settings(payload.settings_overrides)
    model = RadiusModel(settings.picker, center=payload.center.to_coordinate(), radius_m=payload.radius_m)
    return build_confirmation_result(model.snapshot(), settings.deep_link)
