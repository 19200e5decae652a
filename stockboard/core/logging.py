"""Structured logging configuration with request ID tracking.

Two output formats, selected by ``LOG_FORMAT``: one JSON object per line
(production) or a compact text line (development). Both include the id of
the request being served and any ``extra={...}`` fields passed by callers.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import settings


# Context variable for request ID tracking
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord carries; anything else came in through `extra=`
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

# Libraries that log every statement or request at INFO
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "asyncpg")


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": _record_time(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        for key, value in _extra_fields(record).items():
            log_data.setdefault(key, value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if settings.debug:
            log_data["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """One line per record: time, level, request id, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        request_id = request_id_var.get()
        rid = f"[{request_id[:8]}] " if request_id else ""
        timestamp = _record_time(record).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{timestamp} {record.levelname:8} {rid}{record.name}: {record.getMessage()}"

        extras = _extra_fields(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


class CredentialFilter(logging.Filter):
    """Mask passwords embedded in connection URLs.

    Driver errors and engine messages can echo the DSN, e.g.
    ``postgresql://user:secret@db:5432/stockboard``.
    """

    _URL_PASSWORD = re.compile(r"(\w+(?:\+\w+)?://[^:/@\s]+:)[^@\s]+(@)")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self._URL_PASSWORD.sub(r"\1***\2", message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging() -> None:
    """Configure the root logger from settings (idempotent)."""
    level = getattr(logging, settings.log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        StructuredFormatter() if settings.log_format == "json" else TextFormatter()
    )
    handler.addFilter(CredentialFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the stockboard prefix."""
    return logging.getLogger(f"stockboard.{name}")
