"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- API/CLI inputs (`SelectionPayload`, `GeocodeRequest`, `HandleDragPayload`)
- the confirmed, exported selection (`ConfirmationResult`)

The in-memory picker state (`Selection`, `Coordinate`) is plain frozen dataclasses in
`georadius.picker.model` and `georadius.core.geo`; the models here validate data at
the edges and convert into those types.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from georadius.core.geo import Coordinate

MIN_ADDRESS_LENGTH = 3


class GeoPoint(BaseModel):
    """A geographic point in decimal degrees."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def from_coordinate(cls, coord: Coordinate) -> "GeoPoint":
        return cls(latitude=coord.latitude, longitude=coord.longitude)


class SelectionPayload(BaseModel):
    """A center/radius pair as sent by a client.

    The radius is not range-checked here: the radius model clamps it.
    """

    center: GeoPoint
    radius_m: float
    settings_overrides: dict[str, Any] | None = None


class HandleDragPayload(BaseModel):
    """Center plus the pointer position of the radius handle."""

    center: GeoPoint
    handle: GeoPoint
    settings_overrides: dict[str, Any] | None = None


class GeocodeRequest(BaseModel):
    """Free-text address lookup request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(..., min_length=MIN_ADDRESS_LENGTH)


class GeocodeResponse(GeoPoint):
    """Coordinate resolved for an address."""

    address: str


class ConfirmationResult(BaseModel):
    """The exported selection: rounded coordinates, integer radius and deep link."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    radius_m: int
    deep_link_uri: str

    @field_validator("deep_link_uri")
    @classmethod
    def _require_query(cls, uri: str) -> str:
        if "?" not in uri:
            raise ValueError("deep_link_uri must carry a query string")
        return uri
