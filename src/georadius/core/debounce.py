"""
Trailing-edge debouncing for expensive consumers.

Used to coalesce bursts of radius updates (many per second during a handle drag)
into one circle repaint, and as a one-shot timer for the "copied" feedback window.

When an asyncio loop is running, firing is scheduled with `loop.call_later`.
Without a loop (CLI, synchronous callers) the owner drives it with `poll()` or
`flush()`.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class Debouncer:
    """Invoke `callback` once, `delay_seconds` after the last `trigger()`."""

    delay_seconds: float
    callback: Callable[[], None]

    def __post_init__(self) -> None:
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be >= 0")
        self._deadline: float | None = None
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def trigger(self) -> None:
        """(Re)start the delay window."""
        self._deadline = time.monotonic() + self.delay_seconds
        self._schedule(self.delay_seconds)

    def poll(self) -> bool:
        """Fire if the window has elapsed; returns True when the callback ran."""
        if self._deadline is None:
            return False
        remaining = self._deadline - time.monotonic()
        if remaining > 0:
            self._schedule(remaining)
            return False
        self._fire()
        return True

    def flush(self) -> bool:
        """Fire now if a call is pending."""
        if self._deadline is None:
            return False
        self._fire()
        return True

    def cancel(self) -> None:
        self._deadline = None
        self._cancel_handle()

    def _schedule(self, delay: float) -> None:
        self._cancel_handle()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._handle = loop.call_later(delay, self.poll)

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._deadline = None
        self._cancel_handle()
        self.callback()
