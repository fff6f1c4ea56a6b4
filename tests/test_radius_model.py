import math

import pytest

from georadius.config.settings import PickerSettings, get_settings
from georadius.core.geo import Coordinate, destination, distance
from georadius.picker.model import RadiusModel, Selection, clamp_radius


def _model(**kwargs) -> RadiusModel:
    return RadiusModel(get_settings().picker, **kwargs)


def test_model_starts_from_configured_defaults():
    model = _model()
    assert model.center == Coordinate(latitude=51.5072, longitude=-0.1276)
    assert model.radius_m == 5000


@pytest.mark.parametrize(
    "value,expected",
    [
        (-5, 100),
        (999_999, 50_000),
        (100, 100),
        (50_000, 50_000),
        (1234.5, 1234.5),
        (float("nan"), 100),
        (float("inf"), 50_000),
        (float("-inf"), 100),
    ],
)
def test_set_radius_clamps_instead_of_rejecting(value, expected):
    model = _model()
    applied = model.set_radius(value)
    assert applied == expected
    assert model.radius_m == expected


def test_initial_radius_is_clamped_too():
    assert _model(radius_m=5).radius_m == 100


def test_clamp_radius_respects_custom_bounds():
    assert clamp_radius(10, 50, 60) == 50
    assert clamp_radius(70, 50, 60) == 60


def test_set_center_keeps_radius_and_is_idempotent():
    model = _model()
    model.set_radius(7000)
    target = Coordinate(latitude=40.0, longitude=-74.0)

    assert model.set_center(target) is True
    once = model.snapshot()
    assert model.set_center(target) is False
    assert model.snapshot() == once
    assert once == Selection(center=target, radius_m=7000)


def test_set_center_within_epsilon_is_a_noop():
    model = _model()
    before = model.snapshot()
    nudged = Coordinate(latitude=before.center.latitude + 1e-9, longitude=before.center.longitude)
    assert model.set_center(nudged) is False
    assert model.snapshot() is before


def test_center_and_radius_updates_commute():
    target = Coordinate(latitude=35.0, longitude=139.0)

    a = _model()
    a.set_center(target)
    a.set_radius(2500)

    b = _model()
    b.set_radius(2500)
    b.set_center(target)

    assert a.snapshot() == b.snapshot()


def test_handle_drag_sets_radius_from_distance_only():
    model = _model(center=Coordinate(0, 0))
    handle = destination(Coordinate(0, 0), 12_345.6, 200)
    applied = model.set_radius_from_handle_drag(handle)
    assert applied == pytest.approx(12_345.6, abs=1e-3)
    assert model.center == Coordinate(0, 0)


def test_handle_drag_beyond_bounds_is_clamped():
    model = _model(center=Coordinate(0, 0))
    assert model.set_radius_from_handle_drag(Coordinate(0, 0.0001)) == 100
    assert model.set_radius_from_handle_drag(Coordinate(0, 5)) == 50_000


def test_derived_handle_follows_selection():
    model = _model(center=Coordinate(10, 20), radius_m=3000)
    handle = model.derived_handle_position()
    assert distance(model.center, handle) == pytest.approx(3000, abs=1e-3)
    assert handle.longitude > 20

    model.set_radius(9000)
    assert distance(model.center, model.derived_handle_position()) == pytest.approx(9000, abs=1e-3)

    model.set_center(Coordinate(-30, 100))
    assert distance(Coordinate(-30, 100), model.derived_handle_position()) == pytest.approx(9000, abs=1e-3)


def test_derived_polygon_uses_configured_resolution():
    settings = PickerSettings(circle_polygon_points=12)
    model = RadiusModel(settings)
    ring = model.derived_polygon()
    assert len(ring) == 13
    assert ring[0] == ring[-1]


def test_snapshot_is_immutable():
    snap = _model().snapshot()
    with pytest.raises(AttributeError):
        snap.radius_m = 1  # type: ignore[misc]


def test_readout_formats_coordinates_and_km():
    model = _model(center=Coordinate(51.5072, -0.1276), radius_m=5000.4)
    assert model.readout() == {"latitude": "51.507200", "longitude": "-0.127600", "radius": "5.00 km"}


def test_picker_settings_reject_inverted_bounds():
    with pytest.raises(ValueError, match="min_radius_m"):
        PickerSettings(min_radius_m=1000, max_radius_m=10)


def test_nan_never_leaks_into_selection():
    model = _model()
    model.set_radius(float("nan"))
    assert not math.isnan(model.radius_m)


def test_set_center_wraps_longitude():
    model = _model()
    assert model.set_center(Coordinate(latitude=10.0, longitude=-190.0)) is True
    assert model.center == Coordinate(latitude=10.0, longitude=170.0)


@pytest.mark.parametrize(
    "coord",
    [
        Coordinate(latitude=95.0, longitude=0.0),
        Coordinate(latitude=-90.5, longitude=0.0),
        Coordinate(latitude=math.nan, longitude=0.0),
        Coordinate(latitude=0.0, longitude=math.inf),
    ],
)
def test_set_center_rejects_invalid_coordinates(coord):
    model = _model()
    before = model.snapshot()
    with pytest.raises(ValueError):
        model.set_center(coord)
    assert model.snapshot() is before
