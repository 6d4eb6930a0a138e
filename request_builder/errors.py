"""Error taxonomy for request building.

All conditions are usage errors detected eagerly at the point of misuse:
they are raised to the immediate caller and never retried or defaulted.
"""

from __future__ import annotations


class RequestBuilderError(Exception):
    """Base class for request builder errors."""


class InvalidSourceKind(RequestBuilderError, TypeError):
    """Raised when a value source is not a record or a string-keyed map."""


class MalformedURL(RequestBuilderError, ValueError):
    """Raised when the bound URL string cannot be parsed."""


class InvalidPattern(RequestBuilderError, ValueError):
    """Raised when a REMOVE_MATCHING key is not a valid regular expression."""
