"""User-visible notices (the toast collaborator)."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def info(self, title: str, description: str) -> None: ...

    def error(self, title: str, description: str) -> None: ...


class LoggingNotifier:
    """Routes notices to the log when no UI is attached (CLI, API)."""

    def info(self, title: str, description: str) -> None:
        logger.info("%s: %s", title, description)

    def error(self, title: str, description: str) -> None:
        logger.warning("%s: %s", title, description)
