"""Logging setup for PerfHook.

All modules log through ``logging.getLogger(__name__)``; this module only
configures the ``perfhook`` parent logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Literal, cast

LogLevel = Literal["silent", "error", "warn", "info", "debug"]

ROOT_LOGGER_NAME = "perfhook"

_LEVELS: dict[str, int] = {
    "silent": logging.CRITICAL + 10,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_current_level: LogLevel = "info"
_handler: logging.Handler | None = None


def is_log_level(value: object) -> bool:
    return isinstance(value, str) and value in _LEVELS


def configure_logger(log_level: LogLevel = "info", prefix: str = "PerfHook") -> logging.Logger:
    """Attach a single stderr handler to the ``perfhook`` logger and set its level."""
    global _handler

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        root.addHandler(_handler)
    _handler.setFormatter(logging.Formatter(f"[{prefix}] %(levelname)s %(name)s: %(message)s"))

    set_log_level(log_level)
    return root


def set_log_level(log_level: LogLevel) -> None:
    global _current_level

    if not is_log_level(log_level):
        raise ValueError(f"Invalid log level {log_level!r}, expected one of {list(_LEVELS)}")
    _current_level = cast(LogLevel, log_level)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(_LEVELS[log_level])


def get_log_level() -> LogLevel:
    return _current_level
