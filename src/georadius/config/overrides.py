from __future__ import annotations


# Overrides come from JSON payloads (dict-like objects), so typing stays flexible and
# unexpected shapes are reported with clear messages.
from typing import Any, Mapping

from georadius.config.settings import Settings

"""
Per-request settings overrides (safe subset).

API clients can send `settings_overrides` to tune picker knobs for a single request
(radius bounds, polygon resolution, debounce delay). This module:
- validates the override payload against a whitelist,
- deep-merges the safe subset onto current settings,
- re-validates with Pydantic to ensure types/ranges remain correct.

The deep-link base URI and geocoder endpoints are never overridable: the receiving
application depends on the former, and the latter would let a client redirect
outbound requests.
"""

# A value of True allows any keys under the subtree; a nested dict allows only the
# listed keys, recursively.
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "picker": {
        "default_center": True,
        "default_radius_m": True,
        "min_radius_m": True,
        "max_radius_m": True,
        "handle_debounce_ms": True,
        "circle_polygon_points": True,
    },
    "deep_link": {
        "copy_feedback_ms": True,
        "dismiss_after_copy": True,
    },
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    # A new dict so the caller's `base` is never mutated.
    merged: dict[str, Any] = dict(base)
    for key, override_value in override.items():
        if isinstance(override_value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), override_value)
            continue
        merged[key] = override_value
    return merged


def _filter_overrides(
    overrides: Mapping[str, Any],
    *,
    allowed_tree: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    filtered: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in allowed_tree:
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides contains a disallowed key: '{dotted_path}'"
            )

        allowed = allowed_tree[key]
        if allowed is True:
            filtered[key] = value
            continue

        if not isinstance(value, Mapping):
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides key '{dotted_path}' must be a mapping"
            )

        filtered[key] = _filter_overrides(
            value, allowed_tree=allowed, path=(*path, key)
        )
    return filtered


def apply_settings_overrides(
    settings: Settings, overrides: Mapping[str, Any] | None
) -> Settings:
    """Return a new `Settings` with the whitelisted `overrides` applied.

    Raises:
        ValueError: On disallowed keys, wrong shapes, or values failing validation.
    """
    if not overrides:
        return settings

    safe_overrides = _filter_overrides(
        overrides, allowed_tree=ALLOWED_SETTINGS_OVERRIDES_TREE
    )
    merged_payload = _deep_merge(settings.model_dump(mode="python"), safe_overrides)

    # pydantic.ValidationError subclasses ValueError, so callers handle one type.
    return Settings.model_validate(merged_payload)
