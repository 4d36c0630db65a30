"""Serve command for access-gate CLI.

Imports an ASGI application and runs it behind the gate with uvicorn.
"""

from __future__ import annotations

__all__ = ["serve"]

import sys
from pathlib import Path

import click
import uvicorn
from uvicorn.importer import ImportFromStringError, import_from_string

from access_gate.constants import DEFAULT_SERVE_HOST, DEFAULT_SERVE_PORT
from access_gate.pep import create_access_gate_app
from access_gate.telemetry import get_system_logger

from ..helpers import build_gatekeeper_or_exit, config_option, load_config_or_exit
from ..styling import style_error


@click.command()
@config_option
@click.argument("app")
@click.option("--host", default=DEFAULT_SERVE_HOST, show_default=True, help="Bind address")
@click.option("--port", default=DEFAULT_SERVE_PORT, show_default=True, type=int, help="Bind port")
def serve(config_path: Path, app: str, host: str, port: int) -> None:
    """Serve the ASGI application APP (module:attribute) behind the gate.

    Example:
        access-gate serve myproject.asgi:application --port 8080
    """
    config = load_config_or_exit(config_path)
    gatekeeper = build_gatekeeper_or_exit(config)

    try:
        downstream = import_from_string(app)
    except ImportFromStringError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    gated = create_access_gate_app(downstream, config, gatekeeper=gatekeeper)
    get_system_logger().info(
        {
            "event": "serve_started",
            "message": f"Serving {app} on {host}:{port} ({gated.gatekeeper.rule_count} rules)",
            "component": "cli",
        }
    )
    uvicorn.run(gated, host=host, port=port, log_level=config.logging.log_level.lower())
