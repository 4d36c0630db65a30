"""Pattern compilation and matching for gate rules.

This module turns rule-definition values into compiled regular expressions
and matches request attributes against them:

- Plain strings: anchored exact match. Resource patterns additionally accept
  a single trailing "/" ("/admin" matches "/admin" and "/admin/").
- Pre-built patterns (re.Pattern): used unchanged and unanchored
  (re.Pattern.search semantics).
- Lists and tuples: flattened depth-first, every element converted.
- Delimited strings: split on the delimiter first when one is given.
  Pre-built patterns are never split.

Output order always equals input order, so first-match semantics in the
engine follow declaration order.

Design note: Plain strings are escaped before compilation. A string such as
"/files/*.txt" matches that literal path only; use re.compile() for wildcards.
"""

from __future__ import annotations

__all__ = [
    "Delimiter",
    "Pattern",
    "PatternConverter",
    "PatternInput",
    "compile_patterns",
    "exact_pattern",
    "extend_patterns",
    "match_any",
    "require_str",
    "resource_pattern",
    "split_value",
]

import re
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias, Union

from access_gate.exceptions import InvalidArgumentError, TypeMismatchError

Pattern: TypeAlias = "re.Pattern[str]"

# Accepted rule value: a string, a compiled pattern, or nested lists of both
PatternInput: TypeAlias = Union[str, "re.Pattern[str]", Sequence["PatternInput"]]

# A delimiter splits plain strings into several patterns
Delimiter: TypeAlias = Union[str, "re.Pattern[str]", None]

PatternConverter: TypeAlias = Callable[[Any], "re.Pattern[str]"]


def resource_pattern(value: Any) -> re.Pattern[str]:
    """Convert a resource value into a compiled pattern.

    Args:
        value: Plain path string or pre-built pattern.

    Returns:
        For strings, a pattern matching the exact path with an optional
        single trailing slash. Pre-built patterns are returned unchanged.

    Raises:
        TypeMismatchError: If value is neither a string nor a pattern.
    """
    if isinstance(value, str):
        return re.compile(rf"\A{re.escape(value)}/?\Z")
    if isinstance(value, re.Pattern):
        return value
    raise TypeMismatchError(value, expected="str or re.Pattern")


def exact_pattern(value: Any) -> re.Pattern[str]:
    """Convert an origin or credential value into a compiled pattern.

    Args:
        value: Plain string or pre-built pattern.

    Returns:
        For strings, a pattern matching exactly that string.
        Pre-built patterns are returned unchanged.

    Raises:
        TypeMismatchError: If value is neither a string nor a pattern.
    """
    if isinstance(value, str):
        return re.compile(rf"\A{re.escape(value)}\Z")
    if isinstance(value, re.Pattern):
        return value
    raise TypeMismatchError(value, expected="str or re.Pattern")


def split_value(value: str, delimiter: str | re.Pattern[str]) -> list[str]:
    """Split a delimited string, dropping empty pieces.

    Every empty piece is dropped, including those between two delimiters:
    "/a,,/b" yields ["/a", "/b"]. A kept "" would compile to a resource
    pattern matching "/", silently covering the site root.

    Args:
        value: String to split (e.g., "/a,/b").
        delimiter: Literal delimiter or compiled pattern (e.g., re.compile(r"\\s*,\\s*")).

    Returns:
        Non-empty pieces in original order.
    """
    if isinstance(delimiter, re.Pattern):
        pieces = delimiter.split(value)
    else:
        pieces = value.split(delimiter)
    return [piece for piece in pieces if piece]


def compile_patterns(
    *values: Any,
    delimiter: Delimiter = None,
    converter: PatternConverter = resource_pattern,
) -> list[re.Pattern[str]]:
    """Compile rule values into an ordered list of patterns.

    Args:
        *values: Strings, pre-built patterns, or (nested) lists of them.
        delimiter: If given, plain strings are split on it before conversion.
        converter: Single-value converter (resource_pattern or exact_pattern).

    Returns:
        Compiled patterns in input order (left to right, depth-first).

    Raises:
        TypeMismatchError: If any value has an unsupported type.

    Example:
        >>> patterns = compile_patterns("/a,/b", re.compile("^/api"), delimiter=",")
        >>> [bool(p.search("/b/")) for p in patterns]
        [False, True, False]
    """
    compiled: list[re.Pattern[str]] = []
    for value in values:
        compiled.extend(_compile_value(value, delimiter, converter))
    return compiled


def _compile_value(
    value: Any,
    delimiter: Delimiter,
    converter: PatternConverter,
) -> list[re.Pattern[str]]:
    if isinstance(value, (list, tuple)):
        compiled: list[re.Pattern[str]] = []
        for item in value:
            compiled.extend(_compile_value(item, delimiter, converter))
        return compiled
    if isinstance(value, str) and delimiter is not None:
        return [converter(piece) for piece in split_value(value, delimiter)]
    return [converter(value)]


def extend_patterns(
    target: list[re.Pattern[str]] | None,
    *values: Any,
    delimiter: Delimiter = None,
    converter: PatternConverter = resource_pattern,
) -> list[re.Pattern[str]]:
    """Compile values and append them to an existing pattern list.

    Existing patterns are kept; new patterns are appended in input order.
    Nothing is appended if any value fails to compile.

    Args:
        target: Pattern list to extend in place.
        *values: Values accepted by compile_patterns.
        delimiter: Optional delimiter for plain strings.
        converter: Single-value converter.

    Returns:
        The newly compiled patterns.

    Raises:
        InvalidArgumentError: If target is missing.
        TypeMismatchError: If any value has an unsupported type.
    """
    if target is None:
        raise InvalidArgumentError("Missing pattern list to append to")
    compiled = compile_patterns(*values, delimiter=delimiter, converter=converter)
    target.extend(compiled)
    return compiled


def require_str(value: Any) -> str:
    """Return value as str, rejecting anything that is not a string.

    Raises:
        TypeMismatchError: If value is not a str.
    """
    if not isinstance(value, str):
        raise TypeMismatchError(value, expected="str")
    return value


def match_any(patterns: Sequence[re.Pattern[str]], value: Any) -> bool:
    """Check whether any pattern matches the value.

    Args:
        patterns: Compiled patterns to test, in order.
        value: Request attribute (path, origin address, username, ...).

    Returns:
        True if at least one pattern finds a match, False otherwise
        (including when patterns is empty).

    Raises:
        TypeMismatchError: If value is not a string.
    """
    text = require_str(value)
    return any(pattern.search(text) is not None for pattern in patterns)
