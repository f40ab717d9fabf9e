"""
Domain Model Module Initialization
"""

from sse_gateway.domain.request import (
    GatewayResponse,
    ProxyRequestSpec,
    SSEOptions,
    TLSOptions,
    parse_proxy_request,
)

__all__ = [
    "GatewayResponse",
    "ProxyRequestSpec",
    "SSEOptions",
    "TLSOptions",
    "parse_proxy_request",
]
