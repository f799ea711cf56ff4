"""Structured Logging — one JSON object per line, carrying lifecycle identifiers.

Invariants:
    - Every line has timestamp (of the event, not of formatting), level, logger, message
    - Lifecycle extras (application_id, animal_id, from_status, ...) appear only when set
    - setup_logging is idempotent: calling it twice never duplicates output

Design Decisions:
    - stdlib logging + a small Formatter: services log through `extra=`, nothing else
      to learn (ADR: zero logging dependencies)
    - SQLAlchemy engine logs capped at WARNING; statements are too noisy for production
"""

import json
import logging
from datetime import datetime, timezone

LIFECYCLE_FIELDS = (
    "application_id", "animal_id", "actor_id",
    "from_status", "to_status", "cascaded",
    "error_code", "attempt", "path",
)

_HANDLER_NAME = "shelter-adoption"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: record.__dict__[key]
            for key in LIFECYCLE_FIELDS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler once; later calls only adjust level and format."""
    root = logging.getLogger()
    handler = next(
        (h for h in root.handlers if h.get_name() == _HANDLER_NAME), None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
