"""Shared file utilities for access-gate.

Provides common utilities used by the config layer and the CLI:
- require_file_exists: Friendly error for missing files
- load_validated_json: JSON parsing + Pydantic validation with readable errors
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from access_gate.exceptions import ConfigurationError

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    "load_validated_json",
    "require_file_exists",
]

# Rule tiers whose list entries get "(block rule #2)" style context in errors
_RULE_TIERS = ("allow", "block", "restrict")


def require_file_exists(file_path: Path, file_type: str = "file") -> None:
    """Raise ConfigurationError with helpful message if file doesn't exist.

    Args:
        file_path: Path to check.
        file_type: Description for error message (e.g., "configuration").

    Raises:
        ConfigurationError: If file doesn't exist.
    """
    if file_path.exists():
        return

    raise ConfigurationError(
        f"{file_type.capitalize()} file not found at {file_path}.\n"
        "Pass --config or create the file (see 'access-gate validate -h')."
    )


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    encoding: str | None = "utf-8",
) -> T:
    """Load JSON file and validate against Pydantic model.

    Combines file reading, JSON parsing, and Pydantic validation with
    consistent error messages.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "configuration").
        encoding: File encoding.

    Returns:
        Validated Pydantic model instance.

    Raises:
        ConfigurationError: If JSON is invalid or validation fails.
    """
    try:
        with open(file_path, "r", encoding=encoding) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc_parts = error["loc"]
            loc = ".".join(str(x) for x in loc_parts)
            msg = error["msg"]

            # For rule errors, name the tier and position to help identify the entry
            context = ""
            if len(loc_parts) >= 2 and loc_parts[0] in _RULE_TIERS and isinstance(loc_parts[1], int):
                context = f" ({loc_parts[0]} rule #{loc_parts[1] + 1})"

            errors.append(f"  - {loc}{context}: {msg}")

        raise ConfigurationError(
            f"Invalid {file_type} in {file_path}:\n" + "\n".join(errors)
        ) from e
