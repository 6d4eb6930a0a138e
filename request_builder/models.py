"""Data models for request-builder.

All models use Pydantic v2.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field


# Fixed layout for timestamps rendered into headers and query parameters.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def format_timestamp(value: datetime) -> str:
    """Render a datetime with TIMESTAMP_FORMAT; aware values are shifted to UTC first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


# =============================================================================
# Value Models
# =============================================================================


class Operator(str, Enum):
    """Comparison operator paired with a timestamp in time-based filters."""

    EQ = "eq"
    LT = "lt"
    LTE = "lte"
    GTE = "gte"
    GT = "gt"
    NE = "ne"


class TimeFilter(BaseModel):
    """Time-based filter for API calls, e.g. users whose password expires after (GT) a date.

    Rendered as a single value ``"<op>:<timestamp>"`` when extracted from a
    record, never scanned as a nested record.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    timestamp: datetime = Field(description="Reference point in time")
    operator: Operator = Field(default=Operator.EQ, description="Comparison against timestamp")

    def __str__(self) -> str:
        return f"{self.operator.value}:{format_timestamp(self.timestamp)}"


# =============================================================================
# Request Models
# =============================================================================


class Entity(BaseModel):
    """Request body: a byte stream plus the content type it was attached with.

    The stream is held by reference; nothing here reads it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    content_type: str | None = Field(default=None, description="Content-Type, e.g. application/json")
    reader: Any = Field(description="Binary file-like object with a read() method")


class FinalizedRequest(BaseModel):
    """Immutable description of an outbound request, ready for a transport.

    Header values are flattened to (name, value) pairs in the builder's order,
    so repeated headers keep their relative ordering.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    method: str = Field(description="HTTP method (GET, POST, etc.)")
    url: httpx.URL = Field(description="Parsed URL with the query string fully encoded")
    headers: list[tuple[str, str]] = Field(
        default_factory=list, description="Flattened request headers"
    )
    body: Any = Field(default=None, description="Binary file-like body, or None")
    body_content_type: str | None = Field(default=None, description="Content-Type of the body")

    def header_values(self, name: str) -> list[str]:
        """Return every value of a header, case-insensitively, in order."""
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def to_httpx(self) -> httpx.Request:
        """Build the httpx request handed to a client; reads the body stream."""
        content = self.body.read() if self.body is not None else None
        return httpx.Request(
            method=self.method,
            url=self.url,
            headers=self.headers,
            content=content,
        )


# =============================================================================
# Runtime Configuration Models
# =============================================================================


class ClientConfig(BaseModel):
    """Builder defaults plus the few client options a caller may want from a file."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = Field(default="", description="Initial URL for builders")
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Default headers (supports ${ENV_VAR} substitution)",
    )
    user_agent: str | None = Field(default=None, description="User-Agent header value")
    timeout: float = Field(default=10.0, gt=0, description="Request timeout in seconds")
    follow_redirects: bool = Field(default=False, description="Follow 3xx responses")
    verify_ssl: bool = Field(default=True, description="Verify server certificates")
