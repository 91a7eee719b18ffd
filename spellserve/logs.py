"""Structured JSON logging with a process-wide current logger."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Optional

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "ERROR",
}


class JsonFormatter(logging.Formatter):
    """Formats each record as one JSON object per line.

    Extra key/value pairs are taken from ``extra={"fields": {...}}``.
    """

    def __init__(self, version: Optional[str] = None) -> None:
        super().__init__()
        self.version = version

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname),
            "msg": record.getMessage(),
        }
        if self.version is not None:
            payload["version"] = self.version
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            payload.update(fields)
        return json.dumps(payload, default=str)


def level_from_string(level: str) -> int:
    """Map a level name to a logging level; unknown names mean INFO."""
    return _LEVELS.get(level, logging.INFO)


def new_logger(app_version: str, level: str, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Create a JSON logger tagged with the application version."""
    logger = logging.Logger("spellserve", level_from_string(level))
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JsonFormatter(app_version))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _make_noop() -> logging.Logger:
    logger = logging.Logger("spellserve.noop", logging.CRITICAL + 1)
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.disabled = True
    return logger


_NOOP = _make_noop()
_current: logging.Logger = _NOOP


def get_logger() -> logging.Logger:
    """Return the current logger; a silent one until another is set."""
    return _current


def set_logger(logger: Optional[logging.Logger]) -> None:
    """Install the current logger; None restores the silent one."""
    global _current
    _current = logger if logger is not None else _NOOP