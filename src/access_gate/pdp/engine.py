"""Gatekeeper - evaluate a request path and origin against gate rules.

This module provides the Gatekeeper class that evaluates requests against
allow, block and restrict rules to produce PASS/BLOCK/RESTRICT decisions.

Evaluation flow:
1. Gate disabled → PASS (middleware fully bypassed)
2. First allow rule matching path or origin → PASS
3. First block rule matching path or origin → BLOCK(rule)
4. Auth enabled: first restrict rule matching path or origin
   → RESTRICT(rule) if it holds credentials, otherwise PASS
5. No match → PASS

Design principles:
1. Fixed precedence: Allow > Block > Restrict > Pass
2. Within a tier, the first declared rule wins (declaration order)
3. Only the first matching restrict rule is considered; an empty one
   does not fall through to later restrict rules
4. Evaluation is pure: no I/O, no logging, no mutation

Thread-safety:
    Rule tiers are tuples snapshotted at build time. evaluate() only reads,
    so concurrent calls need no locking as long as rules are not modified
    after the Gatekeeper is built.
"""

from __future__ import annotations

__all__ = ["Gatekeeper"]

from dataclasses import dataclass, field
from typing import TypeVar

from access_gate.pdp.decision import Decision
from access_gate.pdp.rules import AllowRule, BlockRule, RestrictRule, Rule, RuleKind

R = TypeVar("R", bound=Rule)


@dataclass(frozen=True)
class Gatekeeper:
    """Request-gating decision engine.

    Build instances with GatekeeperBuilder; the direct constructor is for
    callers that already hold fully configured rules.

    Attributes:
        enabled: If False, every request passes.
        auth_enabled: If False, the restrict tier is skipped entirely.
        allow_rules: Allow rules in declaration order.
        block_rules: Block rules in declaration order.
        restrict_rules: Restrict rules in declaration order.
    """

    enabled: bool = True
    auth_enabled: bool = True
    allow_rules: tuple[AllowRule, ...] = field(default_factory=tuple)
    block_rules: tuple[BlockRule, ...] = field(default_factory=tuple)
    restrict_rules: tuple[RestrictRule, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence, always store tuples
        object.__setattr__(self, "allow_rules", tuple(self.allow_rules))
        object.__setattr__(self, "block_rules", tuple(self.block_rules))
        object.__setattr__(self, "restrict_rules", tuple(self.restrict_rules))

    @property
    def rule_count(self) -> int:
        """Total number of rules across all tiers."""
        return len(self.allow_rules) + len(self.block_rules) + len(self.restrict_rules)

    def evaluate(self, path: str, origin: str) -> Decision:
        """Evaluate a request against the rule tiers.

        Args:
            path: Request path (e.g., "/admin").
            origin: Client address (e.g., "10.0.0.1").

        Returns:
            Decision with PASS, BLOCK(rule) or RESTRICT(rule).

        Raises:
            TypeMismatchError: If path or origin is not a string and a rule
                needs to inspect it.
        """
        if not self.enabled:
            return Decision.passed()

        if _first_match(self.allow_rules, path, origin) is not None:
            return Decision.passed()

        blocker = _first_match(self.block_rules, path, origin)
        if blocker is not None:
            return Decision.block(blocker)

        if self.auth_enabled:
            restrictor = _first_match(self.restrict_rules, path, origin)
            if restrictor is not None and restrictor.credentials_count > 0:
                return Decision.restrict(restrictor)

        return Decision.passed()

    def rules(self, kind: RuleKind) -> tuple[Rule, ...]:
        """Return the rules of one tier in declaration order."""
        if kind is RuleKind.ALLOW:
            return self.allow_rules
        if kind is RuleKind.BLOCK:
            return self.block_rules
        return self.restrict_rules

    def locate(self, rule: Rule) -> tuple[RuleKind, int]:
        """Return a rule's tier and zero-based position within the tier.

        Used for logging and CLI output.

        Raises:
            ValueError: If the rule does not belong to this gatekeeper.
        """
        tier = self.rules(rule.kind)
        for index, candidate in enumerate(tier):
            if candidate is rule:
                return rule.kind, index
        raise ValueError(f"{rule!r} is not part of this gatekeeper")


def _first_match(rules: tuple[R, ...], path: str, origin: str) -> R | None:
    for rule in rules:
        if rule.matches(path, origin):
            return rule
    return None
