"""Logging setup for the Blog API.

``dev`` writes one readable line per record; ``structured`` writes one JSON
object per line. Request metadata passed through ``extra=`` (see
RequestLoggingMiddleware) is carried in both.
"""

import json
import logging
import sys
from typing import Literal

LogFormat = Literal["structured", "dev"]

DEV_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Record attributes copied into structured output when present
_EXTRA_FIELDS = ("request_id", "method", "path", "status_code", "duration_ms", "user_id")

# Third-party loggers and the level they run at outside DEBUG
_NOISY_LOGGERS = {
    "uvicorn": logging.WARNING,
    "uvicorn.error": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def _extras(record: logging.LogRecord) -> dict:
    return {
        field: getattr(record, field)
        for field in _EXTRA_FIELDS
        if getattr(record, field, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """Serialize each record with json.dumps, one object per line."""

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


class DevFormatter(logging.Formatter):
    """Readable lines, suffixed with the request ID when one is attached."""

    def __init__(self):
        super().__init__(fmt=DEV_FORMAT, datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        request_id = getattr(record, "request_id", None)
        if request_id:
            line = f"{line} (request_id={request_id})"
        return line


def setup_logging(level: str = "INFO", format_type: LogFormat = "dev") -> None:
    """
    Configure the root logger for the application.

    Args:
        level: Log level name, case-insensitive
        format_type: 'structured' for JSON lines, 'dev' for readable output
    """
    level = level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if format_type == "structured" else DevFormatter())
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, level))

    # RequestLoggingMiddleware writes the access log
    for name, quiet_level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    if level == "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.DEBUG)

    get_logger("logging").info(f"Logging configured: level={level}, format={format_type}")


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``blog_api.`` namespace."""
    return logging.getLogger(f"blog_api.{name}")
