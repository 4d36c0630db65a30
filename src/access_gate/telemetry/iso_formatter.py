"""JSONL formatter for the system log file.

Each record becomes one JSON object: UTC timestamp, level name, then the
fields of the structured record (event, message, component, details).
"""

from __future__ import annotations

__all__ = ["ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone


class ISO8601Formatter(logging.Formatter):
    """Formats records as JSON lines stamped with UTC ISO 8601 time.

    Format: YYYY-MM-DDTHH:MM:SS.sssZ
    Example line:
        {"time": "2025-12-04T10:48:37.123Z", "level": "WARNING", "event": "auth_failed", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Render one record as a JSON line.

        Args:
            record: Log record whose msg is a dict or a plain string.

        Returns:
            str: JSON object with time, level and the record fields.
        """
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        fields = record.msg if isinstance(record.msg, dict) else {"message": record.getMessage()}

        # Values such as Path or Enum are written as their str()
        return json.dumps({"time": timestamp, "level": record.levelname, **fields}, default=str)
