"""Hand-off of finalized requests to an httpx client.

The builder never performs I/O. Callers own the client; this module only
converts a FinalizedRequest and reports transport failures as TransportError.

Usage:
    with build_client(config) as client:
        response = send(client, builder.make())
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from request_builder.models import ClientConfig, FinalizedRequest

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when httpx fails to deliver a request."""


def build_client(config: ClientConfig, **overrides: Any) -> httpx.Client:
    """Create an httpx.Client honoring the configured timeout, redirects and verification.

    Keyword overrides are passed straight to httpx.Client (e.g. transport=...).
    """
    options: dict[str, Any] = {
        "timeout": config.timeout,
        "follow_redirects": config.follow_redirects,
        "verify": config.verify_ssl,
    }
    options.update(overrides)
    return httpx.Client(**options)


def send(client: httpx.Client, request: FinalizedRequest) -> httpx.Response:
    """Send request with client and return the response, whatever its status.

    Raises:
        TransportError: If httpx raises a request error (timeout, refused
                        connection, protocol error).
    """
    logger.debug("Sending %s %s", request.method, request.url)
    try:
        return client.send(request.to_httpx())
    except httpx.RequestError as e:
        raise TransportError(
            f"{type(e).__name__} while sending {request.method} {request.url}: {e}"
        ) from e
