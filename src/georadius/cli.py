"""
georadius CLI entrypoint.

Quick local access to the picker core without a map frontend:
- `circle`: derived handle + polygon for a selection (optionally as GeoJSON)
- `confirm`: rounded result and deep link (optionally handed to the OS)
- `geocode`: resolve an address via the configured geocoder
"""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from pydantic import ValidationError

from georadius.config.settings import get_settings
from georadius.core.errors import GeocodeError
from georadius.core.geo import Coordinate
from georadius.core.logging import configure_logging
from georadius.domain.models import MIN_ADDRESS_LENGTH, GeocodeRequest
from georadius.ingestion.geocoder import NominatimGeocoder
from georadius.picker.confirmation import ConfirmationFlow, WebBrowserOpener
from georadius.picker.controller import InteractionController
from georadius.picker.model import RadiusModel
from georadius.picker.render import GeoJsonRenderer


def _model_from_args(args: argparse.Namespace) -> RadiusModel:
    settings = get_settings()
    return RadiusModel(
        settings.picker,
        center=Coordinate(latitude=float(args.lat), longitude=float(args.lon)),
        radius_m=float(args.radius),
    )


def _cmd_circle(args: argparse.Namespace) -> int:
    settings = get_settings()
    model = _model_from_args(args)
    points = int(args.points) if args.points is not None else settings.picker.circle_polygon_points
    renderer = GeoJsonRenderer(point_count=points)
    controller = InteractionController(model, renderer)
    controller.render()

    if args.geojson:
        print(json.dumps(renderer.feature_collection(), indent=2))
        return 0

    readout = model.readout()
    handle = controller.handle_position
    print(f"Center: {readout['latitude']}, {readout['longitude']}")
    print(f"Radius: {readout['radius']} ({model.radius_m:.1f} m)")
    print(f"Handle: {handle.latitude:.6f}, {handle.longitude:.6f}")
    print(f"Polygon: {points} vertices (closed ring)")
    return 0


def _cmd_confirm(args: argparse.Namespace) -> int:
    settings = get_settings()
    model = _model_from_args(args)
    flow = ConfirmationFlow(
        model,
        settings.deep_link,
        opener=WebBrowserOpener() if args.open else None,
    )
    result = flow.confirm()

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
        return 0

    print(f"Lat: {result.latitude}")
    print(f"Lng: {result.longitude}")
    print(f"Radius: {result.radius_m}m")
    print(f"Deep Link URL: {result.deep_link_uri}")
    return 0


def _cmd_geocode(args: argparse.Namespace) -> int:
    try:
        request = GeocodeRequest(address=args.address)
    except ValidationError:
        print(f"Address must be at least {MIN_ADDRESS_LENGTH} characters long.")
        return 2

    geocoder = NominatimGeocoder(get_settings())
    try:
        coord = asyncio.run(geocoder.geocode(request.address))
    except GeocodeError as exc:
        print(f"Geocoding error: {exc}")
        return 1

    if args.json:
        print(json.dumps({"address": args.address, "latitude": coord.latitude, "longitude": coord.longitude}))
        return 0
    print(f"{coord.latitude:.6f}, {coord.longitude:.6f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the georadius CLI."""
    parser = argparse.ArgumentParser(prog="georadius")
    parser.add_argument("--log-level", default=None, help="Override app.log_level (e.g. DEBUG).")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_selection_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--lat", required=True, type=float)
        p.add_argument("--lon", required=True, type=float)
        p.add_argument("--radius", required=True, type=float, help="Meters; clamped to the configured range.")

    circle = sub.add_parser("circle", help="Show the derived handle and polygon for a selection.")
    add_selection_args(circle)
    circle.add_argument("--points", type=int, default=None, help="Polygon resolution (default from config).")
    circle.add_argument("--geojson", action="store_true", help="Output the scene as GeoJSON")
    circle.set_defaults(func=_cmd_circle)

    confirm = sub.add_parser("confirm", help="Build the confirmation result and deep link.")
    add_selection_args(confirm)
    confirm.add_argument("--open", action="store_true", help="Hand the deep link to the OS handler")
    confirm.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    confirm.set_defaults(func=_cmd_confirm)

    geocode = sub.add_parser("geocode", help="Resolve an address to coordinates.")
    geocode.add_argument("address")
    geocode.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    geocode.set_defaults(func=_cmd_geocode)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m georadius.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
