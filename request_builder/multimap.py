"""Operation-scoped mutation of string multimaps.

The builder keeps headers, query parameters and template variables as
``dict[str, list[str]]`` and routes every mutator call through apply(),
which dispatches on the builder's current Operation.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from request_builder.errors import InvalidPattern


MultiMap = dict[str, list[str]]


class Operation(str, Enum):
    """Mutation semantics applied by the next mutator calls."""

    ADD = "add"  # Append values, creating the key
    SET = "set"  # Replace values; no values drops the key
    DELETE = "delete"  # Drop the exact key
    REMOVE_MATCHING = "remove_matching"  # Drop every key fully matching a regex


def canonical_header_key(key: str) -> str:
    """Canonical MIME header form: "x-request-id" -> "X-Request-Id".

    Keys containing spaces or control characters are returned unchanged.
    """
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in key):
        return key
    return "-".join(segment[:1].upper() + segment[1:].lower() for segment in key.split("-"))


def compile_pattern(key: str) -> re.Pattern[str]:
    """Compile a REMOVE_MATCHING key.

    Raises:
        InvalidPattern: If key is not a valid regular expression.
    """
    try:
        return re.compile(key)
    except re.error as e:
        raise InvalidPattern(f"Invalid key pattern {key!r}: {e}") from e


def apply(
    target: MultiMap,
    operation: Operation,
    key: str,
    values: tuple[str, ...] | list[str],
    normalize: Callable[[str], str] | None = None,
) -> None:
    """Apply operation to target in place.

    Args:
        target: The multimap to mutate.
        operation: Current builder mode.
        key: Exact key, or a regular expression for REMOVE_MATCHING.
        values: Values for ADD and SET; ignored otherwise.
        normalize: Key normalizer applied for exact-key operations
                   (canonical_header_key for headers). Patterns are matched
                   verbatim against the stored, already-normalized keys.

    Raises:
        InvalidPattern: If key is not a valid pattern in REMOVE_MATCHING mode.
    """
    if not key:
        return

    if operation is Operation.REMOVE_MATCHING:
        pattern = compile_pattern(key)
        for existing in [k for k in target if pattern.fullmatch(k)]:
            del target[existing]
        return

    if normalize is not None:
        key = normalize(key)

    if operation is Operation.ADD:
        if values:
            target.setdefault(key, []).extend(values)
    elif operation is Operation.SET:
        if values:
            target[key] = list(values)
        else:
            target.pop(key, None)
    elif operation is Operation.DELETE:
        target.pop(key, None)
