"""System logger for operational events.

This module provides a singleton system logger for gate events: blocked
and restricted requests, failed credential challenges, gatekeeper setup.

Logging strategy:
- Console (stderr): INFO and above by default (level set via set_log_level)
- File (JSONL): Only issues (WARNING, ERROR, CRITICAL), once configured

Records are dicts with "event", "message", "component" and optional
"details" keys. The console shows the message; the file keeps everything.
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "set_log_level",
]

import logging
import sys
from pathlib import Path

from access_gate.constants import APP_NAME
from access_gate.telemetry.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human-readable console output.

        Args:
            record: The log record to format.

        Returns:
            str: Formatted log message with level prefix.
        """
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger - initialized once on first use
_system_logger: logging.Logger | None = None
_file_handler: logging.FileHandler | None = None


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Creates the logger on first call with stderr handler only.
    File handler is added later via configure_system_logger_file().

    Returns:
        logging.Logger: Configured system logger instance.

    Example:
        >>> logger = get_system_logger()
        >>> logger.warning({"event": "auth_failed", "message": "..."})
    """
    global _system_logger

    if _system_logger is not None:
        return _system_logger

    _system_logger = logging.getLogger(f"{APP_NAME}.system")
    _system_logger.setLevel(logging.INFO)
    _system_logger.propagate = False  # Don't propagate to root logger

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in _system_logger.handlers:
        handler.close()
    _system_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(ConsoleFormatter())
    _system_logger.addHandler(stderr_handler)

    return _system_logger


def set_log_level(level: str | int) -> None:
    """Set the system logger level (e.g., "DEBUG", logging.WARNING)."""
    get_system_logger().setLevel(level)


def configure_system_logger_file(log_path: Path) -> None:
    """Add a JSONL file handler to the system logger.

    The file handler logs WARNING, ERROR, CRITICAL only. Calling again with
    a different path replaces the previous file handler.

    Args:
        log_path: Path to the JSONL log file. Parent directories are created.
    """
    global _file_handler

    logger = get_system_logger()

    if _file_handler is not None:
        if Path(_file_handler.baseFilename).resolve() == log_path.resolve():
            return
        logger.removeHandler(_file_handler)
        _file_handler.close()

    log_path.parent.mkdir(parents=True, exist_ok=True)

    _file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _file_handler.setLevel(logging.WARNING)
    _file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(_file_handler)
