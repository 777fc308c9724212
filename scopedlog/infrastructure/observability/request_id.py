"""Request ID management for access logging.

Every request gets an id: the one the client sent in the configured header
(so callers can correlate their own logs), or a fresh UUID4.

Usage:
    request_id = resolve_request_id(request.headers, "X-Request-ID")
"""

from __future__ import annotations

from collections.abc import Mapping
from uuid import uuid4


def generate_request_id() -> str:
    """Generate a new request ID (UUID4).

    Returns:
        A new UUID4 string suitable for request tracking.
    """
    return str(uuid4())


def resolve_request_id(headers: Mapping[str, str], header_name: str) -> str:
    """Get the client-supplied request id or generate one.

    Args:
        headers: Request headers (case-insensitive mapping in Starlette).
        header_name: Header carrying the id.

    Returns:
        The header value if present and non-blank, else a new UUID4.
    """
    incoming = headers.get(header_name)
    if incoming and incoming.strip():
        return incoming.strip()
    return generate_request_id()
