"""URL composition, template variable binding and query encoding."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from urllib.parse import urlencode, urljoin, urlsplit, urlunsplit

import httpx

from request_builder.errors import MalformedURL


# {identifier} placeholders; braces never nest.
_PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")


def is_absolute(url: str) -> bool:
    """Whether url carries both a scheme and an authority ("https://host...")."""
    parts = urlsplit(url)
    return bool(parts.scheme and parts.netloc)


def resolve_path(current: str, segment: str) -> str:
    """Append a path segment to current, resolving "." and ".." segments.

    An absolute segment replaces current outright. Otherwise the base path is
    treated as a directory and the segment as relative to it, so a trailing
    slash on the base and a leading slash on the segment make no difference:

        resolve_path("https://e.com/test", "/api")  -> "https://e.com/test/api"
        resolve_path("https://e.com/test/", "../api/v2") -> "https://e.com/api/v2"

    The segment may carry its own query string; the base's query is dropped.
    """
    if not segment:
        return current
    if is_absolute(segment) or not current:
        return segment
    parts = urlsplit(current)
    directory = urlunsplit((parts.scheme, parts.netloc, parts.path.rstrip("/") + "/", "", ""))
    return urljoin(directory, segment.lstrip("/"))


def bind_variables(url: str, variables: Mapping[str, Sequence[str]]) -> str:
    """Substitute {name} placeholders with the first value bound to name.

    Single left-to-right pass: substituted text is not re-scanned, and
    placeholders with no binding are left intact, braces included.
    """

    def replace(match: re.Match) -> str:
        values = variables.get(match.group(1))
        if not values:
            return match.group(0)
        return values[0]

    return _PLACEHOLDER_PATTERN.sub(replace, url)


def append_query(url: str, parameters: Mapping[str, Sequence[str]]) -> str:
    """Append encoded parameters after any query already present in url.

    Keys keep insertion order and multi-values repeat the key
    (key=v1&key=v2). A fragment stays at the end.
    """
    pairs = [(key, value) for key, values in parameters.items() for value in values]
    if not pairs:
        return url
    base, hash_sign, fragment = url.partition("#")
    if "?" not in base:
        separator = "?"
    elif base.endswith(("?", "&")):
        separator = ""
    else:
        separator = "&"
    return f"{base}{separator}{urlencode(pairs)}{hash_sign}{fragment}"


def parse_url(url: str) -> httpx.URL:
    """Parse url with httpx.

    Raises:
        MalformedURL: If httpx rejects the URL.
    """
    try:
        return httpx.URL(url)
    except httpx.InvalidURL as e:
        raise MalformedURL(f"Cannot parse URL {url!r}: {e}") from e
