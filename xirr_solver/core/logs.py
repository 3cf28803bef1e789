# xirr_solver/core/logs.py
"""
Logging helpers.

Every module logs through a child of the `xirr_solver` logger. Nothing is
attached by default, so host applications keep control of handlers. Setting
XIRR_DEBUG=1 adds a rotating debug file (XIRR_LOG_PATH, default
logs/xirr_debug.log) for tracing Newton iterations offline. Modules call
get_logger() when they log, so the flag may be flipped after import.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

ROOT_LOGGER_NAME = "xirr_solver"

_FILE_HANDLER: RotatingFileHandler | None = None


def debug_enabled() -> bool:
    return os.getenv("XIRR_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger (or a child of it), wiring the debug file on first use if enabled."""
    if debug_enabled():
        _attach_debug_file()
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _attach_debug_file() -> None:
    """Best-effort rotating file handler on the root package logger."""
    global _FILE_HANDLER
    if _FILE_HANDLER is not None:
        return

    root = logging.getLogger(ROOT_LOGGER_NAME)
    log_path = os.getenv("XIRR_LOG_PATH", os.path.join("logs", "xirr_debug.log"))
    try:
        os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
        handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    except OSError:
        # unwritable location: keep logging to whatever the host configured
        return

    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="(%Y-%m-%d %H:%M:%S)",
        )
    )
    handler.setLevel(logging.DEBUG)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)
    _FILE_HANDLER = handler


__all__ = ["ROOT_LOGGER_NAME", "debug_enabled", "get_logger"]
