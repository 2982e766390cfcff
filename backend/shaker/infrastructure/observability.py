"""Structured Logging — JSON formatter and setup for the server and import runs.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (user_id, handshake_id, error_code, ...) surfaced when present
    - JSON format for log shippers, human-readable otherwise

Design Decisions:
    - JSONFormatter on top of stdlib logging: no extra dependency
    - setup_logging called once by the CLI before anything else logs
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "user_id", "handshake_id", "external_id", "display_name",
    "error_code", "path", "operation",
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
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
