"""JSON log formatting for venv-cleaner."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Set by RunContextFilter; emitted only when present
_RUN_CONTEXT_FIELDS = ("target_path", "pipeline_state")


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Every entry has ``timestamp`` (ISO-8601 UTC), ``level`` and ``message``.
    ``logger`` is added for named loggers. ``target_path`` and
    ``pipeline_state`` are added while a target is processed or a run is in
    progress, and ``exception`` when the record carries exception info.
    """

    def format(self, record: logging.LogRecord) -> str:
        record_time = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": record_time.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name

        for field in _RUN_CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                entry[field] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
