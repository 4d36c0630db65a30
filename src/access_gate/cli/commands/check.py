"""Check command for access-gate CLI.

Shows how the configured gate would decide a request, without serving it.
"""

from __future__ import annotations

__all__ = ["check"]

from pathlib import Path

import click

from ..helpers import build_gatekeeper_or_exit, config_option, load_config_or_exit
from ..styling import style_dim, style_disposition


@click.command()
@config_option
@click.argument("path")
@click.option("--origin", "-o", default="", help="Client address of the request (e.g., 10.0.0.1)")
def check(config_path: Path, path: str, origin: str) -> None:
    """Show the decision for a request PATH.

    Example:
        access-gate check /admin --origin 10.0.0.1
    """
    config = load_config_or_exit(config_path)
    gatekeeper = build_gatekeeper_or_exit(config)

    decision = gatekeeper.evaluate(path, origin)
    line = style_disposition(decision.disposition)
    if decision.rule is not None:
        kind, index = gatekeeper.locate(decision.rule)
        line += f" ({kind.value} rule #{index + 1})"
    click.echo(line)

    if not gatekeeper.enabled:
        click.echo(style_dim("Gate is disabled; every request passes."))
