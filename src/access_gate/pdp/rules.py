"""Gate rules: what a rule matches and what it carries.

Rule structure:
    Rule
    ├── resource_patterns: list[re.Pattern]   (request path)
    ├── origin_patterns: list[re.Pattern]     (client address)
    └── matches_everything: bool
        ├── AllowRule     - lets matching requests straight through
        ├── BlockRule     - status_code + body rendered as the response
        └── RestrictRule  - CredentialStore checked via a credential challenge

A rule matches a request if its resource patterns match the path OR its
origin patterns match the origin address. Rules only grow: patterns and
credentials are appended, never removed.
"""

from __future__ import annotations

__all__ = [
    "AllowRule",
    "BlockRule",
    "RestrictRule",
    "Rule",
    "RuleKind",
]

import re
from collections.abc import Iterable
from enum import Enum
from typing import Any, ClassVar

from access_gate.constants import (
    DEFAULT_BLOCK_BODY,
    DEFAULT_BLOCK_STATUS_CODE,
    DEFAULT_CREDENTIAL_FIELD_DELIMITER,
    DEFAULT_CREDENTIAL_PAIR_DELIMITER,
)
from access_gate.exceptions import InvalidArgumentError
from access_gate.pdp.credentials import CredentialPair, CredentialStore
from access_gate.pdp.matcher import (
    Delimiter,
    exact_pattern,
    extend_patterns,
    match_any,
    require_str,
    resource_pattern,
)


class RuleKind(str, Enum):
    """Rule tier, in precedence order.

    Inherits from str for easy serialization and comparison.
    """

    ALLOW = "allow"
    BLOCK = "block"
    RESTRICT = "restrict"


class Rule:
    """Common matching capability shared by all rule kinds.

    Attributes:
        resource_patterns: Compiled patterns tested against the request path.
        origin_patterns: Compiled patterns tested against the origin address.
        matches_everything: If True, every request matches.
    """

    kind: ClassVar[RuleKind]

    def __init__(self) -> None:
        self.resource_patterns: list[re.Pattern[str]] = []
        self.origin_patterns: list[re.Pattern[str]] = []
        self.matches_everything: bool = False

    def add_resources(self, *values: Any, delimiter: Delimiter = None) -> Rule:
        """Append resource patterns (paths or pre-built patterns).

        Args:
            *values: Strings, compiled patterns, or lists of them.
            delimiter: If given, plain strings are split on it first.

        Returns:
            self, for chaining.
        """
        extend_patterns(self.resource_patterns, *values, delimiter=delimiter, converter=resource_pattern)
        return self

    def add_origins(self, *values: Any, delimiter: Delimiter = None) -> Rule:
        """Append origin patterns (addresses or pre-built patterns).

        Args:
            *values: Strings, compiled patterns, or lists of them.
            delimiter: If given, plain strings are split on it first.

        Returns:
            self, for chaining.
        """
        extend_patterns(self.origin_patterns, *values, delimiter=delimiter, converter=exact_pattern)
        return self

    def mark_matches_everything(self) -> Rule:
        """Make the rule apply to every request. Idempotent."""
        self.matches_everything = True
        return self

    all_resources = mark_matches_everything

    def matches_resource(self, path: str) -> bool:
        """Check the request path against the resource patterns.

        Raises:
            TypeMismatchError: If path is not a string.
        """
        if self.matches_everything:
            return True
        return match_any(self.resource_patterns, path)

    def matches_origin(self, addr: str) -> bool:
        """Check the origin address against the origin patterns.

        Raises:
            TypeMismatchError: If addr is not a string.
        """
        if self.matches_everything:
            return True
        return match_any(self.origin_patterns, addr)

    def matches(self, path: str, origin: str) -> bool:
        """Return True if the rule applies to the path or to the origin."""
        return self.matches_resource(path) or self.matches_origin(origin)

    def __repr__(self) -> str:
        if self.matches_everything:
            return f"{type(self).__name__}(everything)"
        return (
            f"{type(self).__name__}(resources={len(self.resource_patterns)}, "
            f"origins={len(self.origin_patterns)})"
        )


class AllowRule(Rule):
    """Exception rule: matching requests bypass block and restrict rules."""

    kind = RuleKind.ALLOW


class BlockRule(Rule):
    """Rejects matching requests with a fixed status code and HTML body.

    Attributes:
        status_code: HTTP status of the rejection (default 403).
        body: Response body chunks (str or bytes), sent in order.
    """

    kind = RuleKind.BLOCK

    def __init__(self) -> None:
        super().__init__()
        self.status_code: int = DEFAULT_BLOCK_STATUS_CODE
        self.body: tuple[str | bytes, ...] = DEFAULT_BLOCK_BODY

    def set_body(self, chunks: Iterable[str | bytes]) -> BlockRule:
        """Replace the response body.

        Args:
            chunks: Iterable of str or bytes chunks. A bare string is
                rejected so that "text" is not sent one character at a time.

        Raises:
            InvalidArgumentError: If chunks is not an iterable of chunks.
        """
        if isinstance(chunks, (str, bytes)) or not isinstance(chunks, Iterable):
            raise InvalidArgumentError("Body must be an iterable of chunks")
        body = tuple(chunks)
        for chunk in body:
            if not isinstance(chunk, (str, bytes)):
                raise InvalidArgumentError(f"Body chunks must be str or bytes, got {type(chunk).__name__}")
        self.body = body
        return self

    def set_status_code(self, code: Any) -> BlockRule:
        """Replace the response status code.

        Raises:
            InvalidArgumentError: If code cannot be converted to an integer.
        """
        try:
            self.status_code = int(code)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Status code must be an integer, got {code!r}") from e
        return self

    def render_body(self) -> bytes:
        """Join body chunks into the bytes sent on the wire (str chunks as UTF-8)."""
        return b"".join(chunk.encode("utf-8") if isinstance(chunk, str) else chunk for chunk in self.body)


class RestrictRule(Rule):
    """Demands credentials for matching requests.

    A restrict rule without credentials never restricts anything.

    Attributes:
        credentials: Ordered username/password pattern pairs.
    """

    kind = RuleKind.RESTRICT

    def __init__(self) -> None:
        super().__init__()
        self.credentials = CredentialStore()

    def add_credentials(
        self,
        *values: Any,
        field_delimiter: Delimiter = DEFAULT_CREDENTIAL_FIELD_DELIMITER,
        pair_delimiter: Delimiter = DEFAULT_CREDENTIAL_PAIR_DELIMITER,
    ) -> list[CredentialPair]:
        """Append credential pairs. See CredentialStore.add()."""
        return self.credentials.add(*values, field_delimiter=field_delimiter, pair_delimiter=pair_delimiter)

    def credentials_match(self, username: str, password: str) -> bool:
        """Validator used by the credential challenge."""
        return self.credentials.matches(require_str(username), require_str(password))

    @property
    def credentials_count(self) -> int:
        """Number of stored credential pairs."""
        return self.credentials.count()
