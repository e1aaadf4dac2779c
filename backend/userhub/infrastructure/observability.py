"""Structured Logging — JSON formatter and logging setup for the API process.

Invariants:
    - Every JSON record has timestamp (record creation time, UTC), level, logger, message
    - Request/domain extras (path, method, status_code, identity, action...) appear
      only when the caller passed them
    - setup_logging is idempotent: a second call swaps the handler instead of adding one
    - uvicorn.access is silenced below WARNING; the request middleware logs instead

Design Decisions:
    - stdlib logging + a small formatter, configured once from the app lifespan
"""

import json
import logging
from datetime import datetime, timezone

REQUEST_FIELDS = (
    "method", "path", "status_code", "duration_ms", "identity",
)
DOMAIN_FIELDS = ("error_code", "category", "resource_id", "debug_info", "action")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in REQUEST_FIELDS + DOMAIN_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exc_type"] = record.exc_info[0].__name__
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _build_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    formatter = JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the process log handler; safe to call more than once."""
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = _build_handler(fmt)
    root.addHandler(_handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
