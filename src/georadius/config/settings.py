# src/georadius/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/georadius/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GEORADIUS_LOG_LEVEL`, `GEORADIUS_DEEP_LINK_BASE`)
- an external YAML file via `GEORADIUS_CONFIG_PATH`

Design rule:
- Picker knobs (radius bounds, debounce delay, polygon resolution) live in YAML and are
  passed into the picker at construction, not read from module-level constants.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from georadius.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `georadius.config`."""
    text = resources.files("georadius.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "georadius"
    http_timeout_seconds: float = 10
    log_level: str = "INFO"


class CenterSettings(BaseModel):
    latitude: float = Field(51.5072, ge=-90, le=90)
    longitude: float = Field(-0.1276, ge=-180, le=180)


class PickerSettings(BaseModel):
    """Knobs consumed by the radius model and the interaction controller."""

    default_center: CenterSettings = Field(default_factory=CenterSettings)
    default_radius_m: float = Field(5000, gt=0)
    min_radius_m: float = Field(100, ge=0)
    max_radius_m: float = Field(50_000, gt=0)
    handle_debounce_ms: int = Field(500, ge=0)
    circle_polygon_points: int = Field(64, ge=3)
    handle_bearing_deg: float = 90
    center_epsilon_m: float = Field(0.01, ge=0)
    initial_zoom: int = Field(10, ge=0, le=22)
    locate_zoom: int = Field(13, ge=0, le=22)
    geocode_zoom: int = Field(14, ge=0, le=22)

    @model_validator(mode="after")
    def _validate_bounds(self) -> "PickerSettings":
        if self.min_radius_m > self.max_radius_m:
            raise ValueError("picker.min_radius_m must not exceed picker.max_radius_m")
        return self


class DeepLinkSettings(BaseModel):
    base_uri: str = "myapp://location-picker"
    coordinate_decimals: int = Field(6, ge=0, le=12)
    copy_feedback_ms: int = Field(2000, ge=0)
    dismiss_after_copy: bool = True


class GeocoderSettings(BaseModel):
    base_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "georadius/0.1.0 (geocode; please set your own UA)"
    accept_language: str = "en"
    timeout_seconds: float = 10


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    picker: PickerSettings = Field(default_factory=PickerSettings)
    deep_link: DeepLinkSettings = Field(default_factory=DeepLinkSettings)
    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("GEORADIUS_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    deep_link_base = os.getenv("GEORADIUS_DEEP_LINK_BASE")
    if deep_link_base:
        data.setdefault("deep_link", {})["base_uri"] = deep_link_base

    geocoder_url = os.getenv("GEORADIUS_GEOCODER_URL")
    if geocoder_url:
        data.setdefault("geocoder", {})["base_url"] = geocoder_url

    user_agent = os.getenv("GEORADIUS_GEOCODER_USER_AGENT")
    if user_agent:
        data.setdefault("geocoder", {})["user_agent"] = user_agent

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("GEORADIUS_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
