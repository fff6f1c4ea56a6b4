import asyncio

import httpx
import pytest

from georadius.config.settings import get_settings
from georadius.core.errors import GeocodeNotFound, GeocodeUnavailable
from georadius.core.geo import Coordinate
from georadius.ingestion.geocoder import NominatimGeocoder, parse_search_payload


def _geocoder(handler) -> NominatimGeocoder:
    return NominatimGeocoder(get_settings(), transport=httpx.MockTransport(handler))


def test_geocode_parses_first_match_and_sends_query():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"lat": "51.5007292", "lon": "-0.1246254", "display_name": "Big Ben"},
                {"lat": "0", "lon": "0"},
            ],
        )

    coord = asyncio.run(_geocoder(handler).geocode("Big Ben, London"))

    assert coord == Coordinate(latitude=51.5007292, longitude=-0.1246254)
    assert len(seen) == 1
    params = seen[0].url.params
    assert params["q"] == "Big Ben, London"
    assert params["format"] == "jsonv2"
    assert params["limit"] == "1"
    assert seen[0].headers["User-Agent"] == get_settings().geocoder.user_agent


def test_geocode_empty_result_is_not_found():
    geocoder = _geocoder(lambda request: httpx.Response(200, json=[]))
    with pytest.raises(GeocodeNotFound):
        asyncio.run(geocoder.geocode("Atlantis"))


def test_geocode_http_error_is_unavailable():
    geocoder = _geocoder(lambda request: httpx.Response(503, text="busy"))
    with pytest.raises(GeocodeUnavailable):
        asyncio.run(geocoder.geocode("London"))


def test_geocode_transport_error_is_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    with pytest.raises(GeocodeUnavailable):
        asyncio.run(_geocoder(handler).geocode("London"))


def test_geocode_invalid_json_is_unavailable():
    geocoder = _geocoder(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(GeocodeUnavailable):
        asyncio.run(geocoder.geocode("London"))


@pytest.mark.parametrize(
    "payload",
    [
        {"lat": "1", "lon": "2"},
        [None],
        [{"lat": "51.5"}],
        [{"lat": "abc", "lon": "0"}],
        [{"lat": "95", "lon": "0"}],
        [{"lat": "nan", "lon": "0"}],
    ],
)
def test_parse_search_payload_rejects_unusable_matches(payload):
    with pytest.raises(GeocodeNotFound):
        parse_search_payload(payload)
