"""Validate command for access-gate CLI.

Checks a configuration file and summarises the rules it declares.
"""

from __future__ import annotations

__all__ = ["validate"]

from pathlib import Path

import click

from access_gate.pdp import RuleKind

from ..helpers import build_gatekeeper_or_exit, config_option, load_config_or_exit
from ..styling import style_dim, style_label, style_success


@click.command()
@config_option
def validate(config_path: Path) -> None:
    """Validate configuration file.

    Checks the configuration file for:
    - Valid JSON syntax
    - Schema validation (rule fields, status codes, regular expressions)
    - Rule values the gate can compile

    Exit codes:
        0: Configuration is valid
        2: Configuration is invalid or not found
    """
    config = load_config_or_exit(config_path)
    gatekeeper = build_gatekeeper_or_exit(config)

    click.echo(style_success(f"Configuration valid: {config_path}"))
    click.echo(f"  {style_label('Enabled')} {'yes' if gatekeeper.enabled else 'no'}")
    click.echo(f"  {style_label('Auth')} {'yes' if gatekeeper.auth_enabled else 'no'}")
    for kind in RuleKind:
        count = len(gatekeeper.rules(kind))
        label = style_label(f"{kind.value.capitalize()} rules")
        click.echo(f"  {label} {count}" if count else f"  {label} {style_dim('none')}")

    empty = [
        index + 1 for index, rule in enumerate(gatekeeper.restrict_rules) if rule.credentials_count == 0
    ]
    if empty:
        numbers = ", ".join(f"#{n}" for n in empty)
        click.echo(style_dim(f"  Restrict rule {numbers} has no credentials and never restricts"))
