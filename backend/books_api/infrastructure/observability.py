"""Structured Logging: JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (error_code, book_id, operation, path) surfaced when present
    - JSON format in production, human-readable text in development

Design Decisions:
    - setup_logging called once on startup via lifespan
    - Handler installed once per process; repeated calls only adjust the level
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_KEYS = (
    "error_code", "category", "severity", "book_id", "operation",
    "path", "method", "status_code", "matched_count", "deleted_count",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure logging for the application."""
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler()
        logging.root.addHandler(_handler)
    if fmt == "json":
        _handler.setFormatter(JSONFormatter())
    else:
        _handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
