"""Shared fixtures for access-gate tests."""

import logging
from collections.abc import Callable, Iterator

import pytest

from access_gate.telemetry import system_logger
from access_gate.telemetry.system_logger import get_system_logger


@pytest.fixture
def system_events(caplog: pytest.LogCaptureFixture) -> Iterator[Callable[[str], list[dict]]]:
    """Capture structured records emitted on the system logger.

    The system logger does not propagate, so caplog's handler is attached
    directly. Yields a function returning the payloads logged so far for
    one event name.
    """
    logger = get_system_logger()
    logger.addHandler(caplog.handler)

    def events(name: str) -> list[dict]:
        return [r.msg for r in caplog.records if isinstance(r.msg, dict) and r.msg.get("event") == name]

    try:
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            yield events
    finally:
        logger.removeHandler(caplog.handler)


@pytest.fixture
def restore_logger() -> Iterator[logging.Logger]:
    """Undo level changes and file handlers added by a test."""
    logger = get_system_logger()
    level = logger.level
    yield logger
    logger.setLevel(level)
    if system_logger._file_handler is not None:
        logger.removeHandler(system_logger._file_handler)
        system_logger._file_handler.close()
        system_logger._file_handler = None
