"""Telemetry for access-gate: the operational system logger."""

from access_gate.telemetry.system_logger import (
    configure_system_logger_file,
    get_system_logger,
    set_log_level,
)

__all__ = [
    "configure_system_logger_file",
    "get_system_logger",
    "set_log_level",
]
