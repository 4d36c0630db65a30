"""CLI output styling utilities.

Provides consistent styling helpers for CLI output:
- Cyan bold for labels
- Green for success messages (with checkmark)
- Red for error messages (with cross)
- Dim for neutral/empty state messages
"""

from __future__ import annotations

__all__ = [
    "style_dim",
    "style_disposition",
    "style_error",
    "style_label",
    "style_success",
]

import click

from access_gate.pdp import Disposition

_DISPOSITION_COLORS = {
    Disposition.PASS: "green",
    Disposition.BLOCK: "red",
    Disposition.RESTRICT: "yellow",
}


def style_label(label: str) -> str:
    """Style a label for list/summary headers.

    Example:
        >>> click.echo(style_label("Block rules") + f" {count}")
        Block rules: 2
    """
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Style a success message with checkmark."""
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Style an error message with cross mark."""
    return click.style(f"✗ {message}", fg="red")


def style_dim(message: str) -> str:
    """Style a neutral/empty state message as dim."""
    return click.style(message, dim=True)


def style_disposition(disposition: Disposition) -> str:
    """Style a disposition in upper case with its tier color."""
    return click.style(disposition.value.upper(), fg=_DISPOSITION_COLORS[disposition], bold=True)
