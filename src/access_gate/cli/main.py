"""Main CLI entry point for access-gate.

Defines the CLI group and registers all subcommands.

Commands:
    check     - Show how a request path/origin would be decided
    serve     - Run an ASGI app behind the gate (uvicorn)
    validate  - Validate a configuration file

Subcommand help:
    access-gate COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from access_gate import __version__

from .commands.check import check
from .commands.serve import serve
from .commands.validate import validate


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """access-gate: allow, block or restrict requests by path and origin."""
    if version:
        click.echo(f"access-gate {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(check)
cli.add_command(serve)
cli.add_command(validate)


def main() -> None:
    """Console script entry point."""
    cli()
