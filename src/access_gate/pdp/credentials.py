"""Credential store for restrict rules.

Holds ordered username/password pattern pairs. Pairs are compared with
the same pattern semantics as origins: plain strings match exactly,
pre-built patterns are used as-is.

Accepted inputs for CredentialStore.add():
    {"username": "admin", "password": "secret"}        mapping
    CredentialPair(...)                                 pre-built pair
    "admin,secret"                                      field-delimited string
    "admin,secret;ops,hunter2"                          several pairs
    ["admin,secret", {"username": ..., ...}]            lists mixing the above

Order of insertion is preserved and duplicates are kept.
"""

from __future__ import annotations

__all__ = [
    "CredentialPair",
    "CredentialStore",
]

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from access_gate.constants import (
    DEFAULT_CREDENTIAL_FIELD_DELIMITER,
    DEFAULT_CREDENTIAL_PAIR_DELIMITER,
)
from access_gate.exceptions import InvalidArgumentError, TypeMismatchError
from access_gate.pdp.matcher import Delimiter, exact_pattern, match_any, split_value


@dataclass(frozen=True, slots=True)
class CredentialPair:
    """One username/password pattern combination.

    Attributes:
        username: Pattern the supplied username must match.
        password: Pattern the supplied password must match.
    """

    username: re.Pattern[str]
    password: re.Pattern[str]

    @classmethod
    def from_values(cls, username: Any, password: Any) -> CredentialPair:
        """Build a pair from plain strings or pre-built patterns."""
        return cls(username=exact_pattern(username), password=exact_pattern(password))

    def matches(self, username: str, password: str) -> bool:
        """Check both fields against the supplied credentials."""
        return match_any((self.username,), username) and match_any((self.password,), password)


class CredentialStore:
    """Ordered collection of credential pairs owned by a restrict rule."""

    def __init__(self) -> None:
        self._pairs: list[CredentialPair] = []

    def add(
        self,
        *values: Any,
        field_delimiter: Delimiter = DEFAULT_CREDENTIAL_FIELD_DELIMITER,
        pair_delimiter: Delimiter = DEFAULT_CREDENTIAL_PAIR_DELIMITER,
    ) -> list[CredentialPair]:
        """Append credential pairs.

        Args:
            *values: Mappings, CredentialPairs, delimited strings, or lists.
            field_delimiter: Separates username from password within a pair.
            pair_delimiter: Separates pairs within one string.

        Returns:
            The pairs that were added, in order.

        Raises:
            TypeMismatchError: If a value has an unsupported type.
            InvalidArgumentError: If a mapping or string lacks a field.
        """
        parsed: list[CredentialPair] = []
        for value in values:
            parsed.extend(self._parse(value, field_delimiter, pair_delimiter))
        # All-or-nothing: a bad value leaves the store untouched
        self._pairs.extend(parsed)
        return parsed

    def matches(self, username: str, password: str) -> bool:
        """Return True if any stored pair accepts the credentials."""
        return any(pair.matches(username, password) for pair in self._pairs)

    def count(self) -> int:
        """Number of stored pairs."""
        return len(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[CredentialPair]:
        return iter(self._pairs)

    def __repr__(self) -> str:
        return f"CredentialStore(count={len(self._pairs)})"

    def _parse(
        self,
        value: Any,
        field_delimiter: Delimiter,
        pair_delimiter: Delimiter,
    ) -> list[CredentialPair]:
        if isinstance(value, CredentialPair):
            return [value]
        if isinstance(value, Mapping):
            return [self._pair_from_mapping(value)]
        if isinstance(value, str):
            return self._pairs_from_string(value, field_delimiter, pair_delimiter)
        if isinstance(value, (list, tuple)):
            pairs: list[CredentialPair] = []
            for item in value:
                pairs.extend(self._parse(item, field_delimiter, pair_delimiter))
            return pairs
        raise TypeMismatchError(value, expected="mapping, str, CredentialPair or list")

    @staticmethod
    def _pair_from_mapping(value: Mapping[str, Any]) -> CredentialPair:
        missing = [key for key in ("username", "password") if key not in value]
        if missing:
            raise InvalidArgumentError(f"Credential mapping is missing: {', '.join(missing)}")
        return CredentialPair.from_values(value["username"], value["password"])

    @staticmethod
    def _pairs_from_string(
        value: str,
        field_delimiter: Delimiter,
        pair_delimiter: Delimiter,
    ) -> list[CredentialPair]:
        chunks = split_value(value, pair_delimiter) if pair_delimiter is not None else [value]
        pairs: list[CredentialPair] = []
        for chunk in chunks:
            if field_delimiter is None:
                raise InvalidArgumentError("A field delimiter is required for string credentials")
            if isinstance(field_delimiter, re.Pattern):
                fields = field_delimiter.split(chunk, maxsplit=1)
            else:
                fields = chunk.split(field_delimiter, 1)
            # "admin," has no password; empty passwords need the mapping form
            if len(fields) != 2 or not fields[1]:
                raise InvalidArgumentError(f"Credential string has no password field: {chunk!r}")
            pairs.append(CredentialPair.from_values(fields[0], fields[1]))
        return pairs
