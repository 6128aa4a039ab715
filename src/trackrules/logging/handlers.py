"""JSON log formatting."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Set on every record by SessionContextFilter, often to None.
_SESSION_ATTRS = ("session_id", "user_id")
_SKIPPED_ATTRS = _RECORD_ATTRS | set(_SESSION_ATTRS) | {"session_tag"}


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON line.

    Output keys: ``timestamp`` (UTC ISO-8601), ``level``, ``message``,
    ``logger`` (not for root), ``context`` (extras and the active
    playback session, if any) and ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _SKIPPED_ATTRS and not key.startswith("_")
        }
        context.update(
            (key, value)
            for key in _SESSION_ATTRS
            if (value := getattr(record, key, None))
        )
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
