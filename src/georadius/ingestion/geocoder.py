"""
Geocoding client (address -> coordinate).

The picker depends only on the `Geocoder` protocol: one async call that either
returns a `Coordinate` or raises a `GeocodeError`. `NominatimGeocoder` implements it
against the OpenStreetMap Nominatim search API.

Results are not cached; every lookup goes upstream.

Important:
    Public Nominatim is rate-limited. Respect its usage policy and configure a
    descriptive User-Agent (`GEORADIUS_GEOCODER_USER_AGENT`).
"""

from __future__ import annotations

import logging
import math
from typing import Any, Protocol

import httpx

from georadius.config.settings import Settings
from georadius.core.errors import GeocodeNotFound, GeocodeUnavailable
from georadius.core.geo import Coordinate
from georadius.core.http import get_json

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def geocode(self, address: str) -> Coordinate: ...


def _parse_float(value: Any) -> float | None:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def parse_search_payload(payload: Any) -> Coordinate:
    """Extract the best match from a Nominatim `jsonv2` search response.

    Raises:
        GeocodeNotFound: If the payload holds no match with usable coordinates.
    """
    if not isinstance(payload, list) or not payload:
        raise GeocodeNotFound("No match for the address.")

    first = payload[0]
    if not isinstance(first, dict):
        raise GeocodeNotFound("Unexpected match shape.")

    lat = _parse_float(first.get("lat"))
    lon = _parse_float(first.get("lon"))
    if lat is None or lon is None:
        raise GeocodeNotFound("Match is missing coordinates.")
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise GeocodeNotFound(f"Match has out-of-range coordinates ({lat}, {lon}).")
    return Coordinate(latitude=lat, longitude=lon)


class NominatimGeocoder:
    """Resolves free-text addresses via Nominatim search."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None):
        self._settings = settings
        self._transport = transport

    async def geocode(self, address: str) -> Coordinate:
        cfg = self._settings.geocoder
        params = {
            "q": address,
            "format": "jsonv2",
            "limit": 1,
            "accept-language": cfg.accept_language,
        }
        logger.info("Geocoding address=%r", address)
        try:
            payload = await get_json(
                cfg.base_url,
                params=params,
                headers={"User-Agent": cfg.user_agent, "Accept": "application/json"},
                timeout_seconds=cfg.timeout_seconds,
                transport=self._transport,
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geocoder request failed for %r: %s", address, str(exc))
            raise GeocodeUnavailable(str(exc)) from exc

        return parse_search_payload(payload)
