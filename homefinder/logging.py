"""Logging setup for homefinder.

Call sites attach listing context through ``extra=``; the JSON formatter
emits any of ``CONTEXT_FIELDS`` found on a record as top-level keys, and
the standard formatter appends them as ``key=value`` pairs.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

CONTEXT_FIELDS: tuple[str, ...] = ("property_id", "key", "table", "count")

QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "faker")


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


class ContextFormatter(logging.Formatter):
    """Pipe-separated console format with listing context appended."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if context:
            line += " | " + " ".join(f"{name}={value}" for name, value in context.items())
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record, listing context as top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", format_type: str = "standard") -> None:
    """Configure the root logger for homefinder.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"json"`` for ``JsonFormatter``, anything else for the console format.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = JsonFormatter() if format_type == "json" else ContextFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("homefinder").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
