"""
Logging setup for the API process and the CLI.

The handler/formatter layout comes from `config/logging.yaml`. Only the level is
decided at runtime: an explicit `--log-level` wins over `app.log_level`
(`GEORADIUS_LOG_LEVEL`).
"""

from __future__ import annotations

import copy
import logging.config
from typing import Any

from georadius.config.settings import get_logging_config, get_settings


def build_logging_config(level: str | None = None) -> dict[str, Any]:
    """Return the dictConfig mapping for `level` (default: `app.log_level`).

    Named loggers in the YAML (e.g. `httpx`) keep their quieter level, except
    at DEBUG where every request is traced too.
    """
    level = (level or get_settings().app.log_level).upper()
    config = copy.deepcopy(get_logging_config())

    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict):
            handler["level"] = level
    if level == "DEBUG":
        for logger_config in config.get("loggers", {}).values():
            if isinstance(logger_config, dict):
                logger_config["level"] = level
    return config


def configure_logging(level: str | None = None) -> None:
    logging.config.dictConfig(build_logging_config(level))
