"""
HTTP Client Module

Builds the outbound httpx client used by one upstream exchange.
"""

import json
import ssl
from typing import Any, Optional, Union

import httpx


def create_upstream_client(
    timeout: Optional[float],
    verify: Union[ssl.SSLContext, bool] = True,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create a single-use HTTP client for one exchange

    Connections are never kept alive, so nothing is shared or reused between exchanges.

    Args:
        timeout: Connect/read/write timeout in seconds (None or 0 disables)
        verify: TLS verification option resolved by the policy check
        transport: Optional transport (used by tests to stand in for the upstream)

    Returns:
        httpx.AsyncClient: Configured client, closed by the exchange
    """
    kwargs: dict[str, Any] = {
        "timeout": httpx.Timeout(timeout or None),
        "limits": httpx.Limits(max_connections=1, max_keepalive_connections=0),
        "follow_redirects": False,
    }
    if transport is not None:
        kwargs["transport"] = transport
    else:
        kwargs["verify"] = verify
    return httpx.AsyncClient(**kwargs)


def encode_body(body: Any) -> Optional[bytes]:
    """
    Encode the caller-supplied body for the outbound request

    Args:
        body: bytes (sent as-is), str (UTF-8 encoded) or any JSON value (serialized)

    Returns:
        Optional[bytes]: Encoded body, or None when there is no body
    """
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
