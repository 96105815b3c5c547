"""Structured Logging — one JSON object per record, ids surfaced as fields.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Domain ids passed via `extra=` (user_id, community_id, goal_id, ...) become
      top-level fields so a workflow can be followed across concepts
    - setup_logging is idempotent: calling it again replaces the handler

Design Decisions:
    - "text" format for local runs and tests, "json" everywhere else
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_KEYS = (
    "workflow", "error_code", "path", "status",
    "user_id", "friend_id", "community_id", "goal_id", "post_id", "comment_id",
)

_HANDLER_NAME = "huddle"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, str(record.__dict__[key]))
            for key in EXTRA_KEYS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
