from __future__ import annotations

import pytest

from georadius.config.overrides import apply_settings_overrides
from georadius.config.settings import get_settings


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()
    out = apply_settings_overrides(settings, None)
    assert out is settings


def test_apply_settings_overrides_can_override_picker_knobs():
    settings = get_settings()
    overrides = {"picker": {"max_radius_m": 20_000, "circle_polygon_points": 32}}

    out = apply_settings_overrides(settings, overrides)

    assert out.picker.max_radius_m == 20_000
    assert out.picker.circle_polygon_points == 32
    # The shared cached settings stay untouched.
    assert settings.picker.max_radius_m == 50_000


def test_apply_settings_overrides_rejects_deep_link_base():
    settings = get_settings()
    overrides = {"deep_link": {"base_uri": "evil://steal"}}
    with pytest.raises(ValueError, match=r"deep_link\.base_uri"):
        apply_settings_overrides(settings, overrides)


def test_apply_settings_overrides_rejects_geocoder_subtree():
    settings = get_settings()
    with pytest.raises(ValueError, match=r"disallowed key: 'geocoder'"):
        apply_settings_overrides(settings, {"geocoder": {"base_url": "http://internal"}})


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()
    with pytest.raises(ValueError, match=r"settings_overrides key 'picker' must be a mapping"):
        apply_settings_overrides(settings, {"picker": 1})


def test_apply_settings_overrides_revalidates_bounds():
    settings = get_settings()
    with pytest.raises(ValueError, match="min_radius_m"):
        apply_settings_overrides(settings, {"picker": {"min_radius_m": 60_000}})


def test_env_overrides_apply_on_load(monkeypatch):
    monkeypatch.setenv("GEORADIUS_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("GEORADIUS_DEEP_LINK_BASE", "otherapp://pick")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.app.log_level == "DEBUG"
        assert settings.deep_link.base_uri == "otherapp://pick"
    finally:
        monkeypatch.delenv("GEORADIUS_LOG_LEVEL")
        monkeypatch.delenv("GEORADIUS_DEEP_LINK_BASE")
        get_settings.cache_clear()


def test_config_path_replaces_packaged_defaults(monkeypatch, tmp_path):
    path = tmp_path / "georadius.yaml"
    path.write_text("picker:\n  min_radius_m: 50\n  max_radius_m: 1000\n", encoding="utf-8")
    monkeypatch.setenv("GEORADIUS_CONFIG_PATH", str(path))
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.picker.min_radius_m == 50
        assert settings.picker.max_radius_m == 1000
        assert settings.picker.default_radius_m == 5000
    finally:
        monkeypatch.delenv("GEORADIUS_CONFIG_PATH")
        get_settings.cache_clear()
