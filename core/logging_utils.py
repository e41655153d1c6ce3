"""Engine logging: one stderr handler, UTC timestamps, quiet HTTP libraries."""

from __future__ import annotations

import logging
import os
import sys
import time

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_HANDLER_NAME = "guardian-root-handler"

# Log every request at INFO; only useful when debugging the engine
_CHATTY_LIBRARIES = ("httpx", "httpcore")


class UTCFormatter(logging.Formatter):
    converter = time.gmtime


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = os.getenv("GUARDIAN_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO"
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        return value if isinstance(value, int) else logging.INFO
    return int(level)


def _find_handler(root: logging.Logger) -> logging.Handler | None:
    for handler in root.handlers:
        if handler.name == _HANDLER_NAME:
            return handler
    return None


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Attach the engine handler once; an explicit level re-levels it.

    Output goes to stderr so machine-readable stdout stays clean.
    """
    root = logging.getLogger()
    handler = _find_handler(root)
    if handler is not None and level is None:
        return root

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.name = _HANDLER_NAME
        handler.setFormatter(UTCFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    resolved = _resolve_level(level)
    root.setLevel(resolved)
    handler.setLevel(resolved)

    library_level = resolved if resolved <= logging.DEBUG else max(resolved, logging.WARNING)
    for name in _CHATTY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger sharing the engine handler."""
    setup_logging()
    return logging.getLogger(name)
