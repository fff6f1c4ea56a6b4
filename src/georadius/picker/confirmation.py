"""
Confirmation flow: snapshot -> result -> deep link -> hand-off -> fallback.

The host cannot tell whether an external application accepted the deep link, so the
fallback (coordinates, radius, copyable link) is always shown right after the
hand-off attempt instead of waiting on a timeout.

Deep-link format (consumed by the receiving app, keep bit-exact):

    myapp://location-picker?lat=<lat>&lng=<lng>&radius=<radius>

Coordinates are rounded to `deep_link.coordinate_decimals` places and printed without
trailing zeros; the radius is an integer meter count.
"""

from __future__ import annotations

import logging
import math
import webbrowser
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Protocol

from georadius.config.settings import DeepLinkSettings
from georadius.core.debounce import Debouncer
from georadius.core.errors import ClipboardWriteFailed
from georadius.domain.models import ConfirmationResult
from georadius.picker.model import RadiusModel, Selection
from georadius.picker.notify import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


class ConfirmationState(str, Enum):
    IDLE = "idle"
    AWAITING_HANDOFF = "awaiting_handoff"
    FALLBACK_VISIBLE = "fallback_visible"


class DeepLinkOpener(Protocol):
    def open(self, uri: str) -> None: ...


class Clipboard(Protocol):
    async def write_text(self, text: str) -> None: ...


class WebBrowserOpener:
    """Hands the URI to the desktop's registered handler."""

    def open(self, uri: str) -> None:
        if not webbrowser.open(uri):
            logger.info("No handler accepted %s", uri)


def format_number(value: float, decimals: int = 6) -> str:
    """Format a rounded coordinate the way the receiving app expects.

    `51.50720000` -> `51.5072`, `12.0` -> `12`, `-0.0` -> `0`.

    Exact ties round away from zero (`51.0078125` -> `51.007813`), so the
    exact binary value is quantized rather than going through `format()`.
    """
    quantized = Decimal(abs(value)).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    text = f"{quantized:f}"
    if value < 0:
        text = "-" + text
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"-0", ""}:
        return "0"
    return text


def round_radius(meters: float) -> int:
    """Round half up to the nearest integer meter."""
    return int(math.floor(meters + 0.5))


def build_deep_link(base_uri: str, latitude: float, longitude: float, radius_m: int, decimals: int = 6) -> str:
    return (
        f"{base_uri}?lat={format_number(latitude, decimals)}"
        f"&lng={format_number(longitude, decimals)}&radius={radius_m}"
    )


def build_confirmation_result(selection: Selection, settings: DeepLinkSettings) -> ConfirmationResult:
    """Round a selection and attach its deep link."""
    decimals = settings.coordinate_decimals
    lat = float(format_number(selection.center.latitude, decimals))
    lng = float(format_number(selection.center.longitude, decimals))
    radius = round_radius(selection.radius_m)
    return ConfirmationResult(
        latitude=lat,
        longitude=lng,
        radius_m=radius,
        deep_link_uri=build_deep_link(settings.base_uri, lat, lng, radius, decimals),
    )


class ConfirmationFlow:
    """State machine over `ConfirmationState` holding the current result."""

    def __init__(
        self,
        model: RadiusModel,
        settings: DeepLinkSettings,
        *,
        opener: DeepLinkOpener | None = None,
        clipboard: Clipboard | None = None,
        notifier: Notifier | None = None,
    ):
        self._model = model
        self._settings = settings
        self._opener = opener
        self._clipboard = clipboard
        self._notifier = notifier or LoggingNotifier()

        self._state = ConfirmationState.IDLE
        self._result: ConfirmationResult | None = None
        self._copied = False
        self._copied_window = Debouncer(
            delay_seconds=settings.copy_feedback_ms / 1000.0,
            callback=self._end_copied_window,
        )

    @property
    def state(self) -> ConfirmationState:
        return self._state

    @property
    def result(self) -> ConfirmationResult | None:
        return self._result

    @property
    def copied(self) -> bool:
        return self._copied

    def confirm(self) -> ConfirmationResult:
        """Snapshot the selection, attempt hand-off and show the fallback."""
        self._copied_window.cancel()
        self._copied = False

        result = build_confirmation_result(self._model.snapshot(), self._settings)
        self._result = result
        self._state = ConfirmationState.AWAITING_HANDOFF

        if self._opener is not None:
            try:
                self._opener.open(result.deep_link_uri)
            except Exception as exc:
                logger.warning("Deep link hand-off failed for %s: %s", result.deep_link_uri, str(exc))

        self._state = ConfirmationState.FALLBACK_VISIBLE
        return result

    async def copy_link(self) -> bool:
        """Copy the deep link; returns True on success."""
        if self._state is not ConfirmationState.FALLBACK_VISIBLE or self._result is None:
            return False

        try:
            if self._clipboard is None:
                raise ClipboardWriteFailed("no clipboard available")
            await self._clipboard.write_text(self._result.deep_link_uri)
        except Exception as exc:
            logger.warning("Clipboard write failed: %s", str(exc))
            self._notifier.error("Copy Failed", "Could not copy to clipboard.")
            return False

        self._copied = True
        self._copied_window.trigger()
        return True

    def poll(self) -> bool:
        """End a due "copied" window (for hosts without an asyncio loop)."""
        return self._copied_window.poll()

    def dismiss(self) -> None:
        self._copied_window.cancel()
        self._copied = False
        self._result = None
        self._state = ConfirmationState.IDLE

    def _end_copied_window(self) -> None:
        self._copied = False
        if self._settings.dismiss_after_copy:
            self.dismiss()
