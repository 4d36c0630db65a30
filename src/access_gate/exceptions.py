"""Custom exceptions for access-gate.

This module contains all custom exceptions used throughout the package.

Setup Errors (raised while declaring rules, fatal to setup):
    - TypeMismatchError: A rule value is neither a string, a pattern,
      nor a list of them; or a match input is not a string
    - InvalidArgumentError: A required argument is missing or malformed

Configuration Errors (raised while loading config files):
    - ConfigurationError: Config file missing, unreadable or invalid

Blocked and restricted requests are NOT exceptions. They are regular
outcomes of the decision engine rendered by the middleware.

Usage:
    from access_gate.exceptions import TypeMismatchError, InvalidArgumentError
"""

from __future__ import annotations

__all__ = [
    "AccessGateError",
    "ConfigurationError",
    "InvalidArgumentError",
    "TypeMismatchError",
]

from typing import Any


class AccessGateError(Exception):
    """Base exception for all access-gate errors."""


class TypeMismatchError(AccessGateError, TypeError):
    """A value has a type the rule engine cannot use.

    Raised when:
    - A resource, origin or credential value is not a string, a compiled
      pattern, or a list of them
    - A path or origin passed to a matcher is not a string

    Inherits from TypeError so callers catching the builtin still work.

    Attributes:
        value: The offending value.
    """

    def __init__(self, value: Any, expected: str = "str, re.Pattern or list") -> None:
        self.value = value
        super().__init__(f"Expected {expected}, got {type(value).__name__}: {value!r}")


class InvalidArgumentError(AccessGateError, ValueError):
    """A required argument is structurally missing or malformed.

    This is a programming or configuration error and is fatal to the
    setup phase. It never occurs while evaluating requests.

    Raised when:
    - A pattern append target is missing
    - A block body is not an iterable of chunks
    - A status code cannot be converted to an integer
    - A credential string has no password field
    """


class ConfigurationError(AccessGateError):
    """Configuration is invalid or incomplete.

    Raised when:
    - Config file does not exist
    - Config file contains invalid JSON
    - Config file fails Pydantic validation

    Attributes:
        exit_code: Process exit code used by the CLI.
    """

    exit_code: int = 2
