"""Decision types for gate evaluation outcomes.

These values define the possible outcomes of evaluation, used by the
gatekeeper to communicate decisions to the middleware.
"""

from __future__ import annotations

__all__ = ["Decision", "Disposition"]

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from access_gate.pdp.rules import BlockRule, RestrictRule


class Disposition(str, Enum):
    """Gate decision outcome.

    Inherits from str for easy serialization and comparison.

    Attributes:
        PASS: Request goes to the downstream app unmodified.
        BLOCK: Request is rejected with the block rule's status and body.
        RESTRICT: Request needs credentials accepted by the restrict rule.
    """

    PASS = "pass"
    BLOCK = "block"
    RESTRICT = "restrict"


@dataclass(frozen=True, slots=True)
class Decision:
    """A disposition plus the rule that produced it.

    Attributes:
        disposition: What the middleware must do.
        rule: The deciding BlockRule or RestrictRule; None for PASS.
    """

    disposition: Disposition
    rule: "BlockRule | RestrictRule | None" = None

    @classmethod
    def passed(cls) -> Decision:
        return cls(Disposition.PASS)

    @classmethod
    def block(cls, rule: "BlockRule") -> Decision:
        return cls(Disposition.BLOCK, rule)

    @classmethod
    def restrict(cls, rule: "RestrictRule") -> Decision:
        return cls(Disposition.RESTRICT, rule)

    @property
    def is_pass(self) -> bool:
        return self.disposition is Disposition.PASS
