"""Tag descriptors for annotated record fields.

A tag is the comma-separated string attached to a record field under a tag
key, e.g. ``"X-Request-Id,omitempty"`` stored under ``"header"``. The first
token is the name, the remaining tokens are modifiers.
"""

from __future__ import annotations

from dataclasses import dataclass


IGNORE_TOKEN = "-"
OMIT_EMPTY_TOKEN = "omitempty"


@dataclass(frozen=True)
class Tag:
    """Parsed tag value.

    Attributes:
        name: First token; empty means "untagged", "-" means "excluded".
        ignore: True if any token (the name included) is exactly "-".
        omit_empty: True if any token is exactly "omitempty".
    """

    name: str = ""
    ignore: bool = False
    omit_empty: bool = False

    @classmethod
    def parse(cls, raw: str | None) -> Tag:
        """Parse a raw tag string. Never raises; garbage yields an empty name."""
        if not isinstance(raw, str):
            return cls()
        tokens = [token.strip() for token in raw.split(",")]
        return cls(
            name=tokens[0],
            ignore=IGNORE_TOKEN in tokens,
            omit_empty=OMIT_EMPTY_TOKEN in tokens,
        )

    @property
    def excluded(self) -> bool:
        """Whether the field contributes nothing for this tag key."""
        return not self.name or self.name == IGNORE_TOKEN or self.ignore
