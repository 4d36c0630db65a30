"""Shared CLI utility functions.

Provides common helpers for CLI commands to avoid duplication.
"""

from __future__ import annotations

__all__ = [
    "build_gatekeeper_or_exit",
    "config_option",
    "load_config_or_exit",
]

import sys
from pathlib import Path

import click

from access_gate.config import AccessGateConfig
from access_gate.constants import DEFAULT_CONFIG_PATH
from access_gate.exceptions import AccessGateError, ConfigurationError
from access_gate.pdp import Gatekeeper, build_gatekeeper

from .styling import style_error

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    envvar="ACCESS_GATE_CONFIG",
    help="Path to the JSON configuration file (env: ACCESS_GATE_CONFIG)",
)


def load_config_or_exit(config_path: Path) -> AccessGateConfig:
    """Load configuration, printing the error and exiting on failure.

    Args:
        config_path: Path to the JSON configuration file.

    Returns:
        Validated AccessGateConfig.
    """
    try:
        return AccessGateConfig.load_from_file(config_path)
    except ConfigurationError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(e.exit_code)


def build_gatekeeper_or_exit(config: AccessGateConfig) -> Gatekeeper:
    """Build the gatekeeper, printing the error and exiting on failure.

    Pydantic validates the shape of the config; this catches values that
    only fail when compiled (e.g., a credential string without a password).
    """
    try:
        return build_gatekeeper(config)
    except AccessGateError as e:
        click.echo(style_error(f"Invalid rule configuration: {e}"), err=True)
        sys.exit(ConfigurationError.exit_code)
