"""Policy Decision Point (PDP) - Gate rule evaluation.

This module evaluates request paths and origins against gate rules to
produce decisions. The PDP is intentionally stateless and side-effect free;
all I/O and enforcement happens in the PEP (../pep/).

Structure:
    matcher.py     - Pattern compilation and matching
    credentials.py - CredentialStore and CredentialPair
    rules.py       - Rule, AllowRule, BlockRule, RestrictRule
    decision.py    - Disposition enum and Decision
    engine.py      - Gatekeeper (evaluate)
    builder.py     - GatekeeperBuilder (setup phase)
"""

from access_gate.pdp.builder import GatekeeperBuilder, build_gatekeeper
from access_gate.pdp.credentials import CredentialPair, CredentialStore
from access_gate.pdp.decision import Decision, Disposition
from access_gate.pdp.engine import Gatekeeper
from access_gate.pdp.matcher import compile_patterns, exact_pattern, resource_pattern
from access_gate.pdp.rules import AllowRule, BlockRule, RestrictRule, Rule, RuleKind

__all__ = [
    # Decision
    "Decision",
    "Disposition",
    # Engine
    "Gatekeeper",
    "GatekeeperBuilder",
    "build_gatekeeper",
    # Rules
    "AllowRule",
    "BlockRule",
    "RestrictRule",
    "Rule",
    "RuleKind",
    # Credentials
    "CredentialPair",
    "CredentialStore",
    # Patterns
    "compile_patterns",
    "exact_pattern",
    "resource_pattern",
]
