"""
Proxy header utilities.

The passthrough path relays the upstream body undecoded, so `content-length` and
`content-encoding` stay valid and are forwarded. Only hop-by-hop headers are
dropped; the ASGI server re-frames the response itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


# RFC 7230 hop-by-hop headers.
_HOP_BY_HOP_HEADERS = {
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
}

# Request body framing is computed by the HTTP client from the encoded body.
_DROP_REQUEST_HEADERS = {
    "content-length",
    "transfer-encoding",
}


def passthrough_headers(raw_headers: Iterable[tuple[bytes, bytes]]) -> list[tuple[bytes, bytes]]:
    """
    Copy upstream response headers as raw bytes, minus hop-by-hop headers.

    Repeated headers (e.g. `set-cookie`) and the original name casing are preserved.
    """
    return [
        (key, value)
        for key, value in raw_headers
        if key.decode("latin-1").lower() not in _HOP_BY_HOP_HEADERS
    ]


def prepare_request_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    """
    Prepare caller-supplied headers for the outbound request.

    Values are coerced to strings; framing headers are removed.
    """
    if not headers:
        return {}

    prepared: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in _DROP_REQUEST_HEADERS:
            continue
        prepared[key] = str(value)
    return prepared
