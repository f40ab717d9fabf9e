"""
Service Layer Module Initialization
"""

from sse_gateway.services.exchange import UpstreamExchange, is_event_stream
from sse_gateway.services.proxy_service import ProxyService

__all__ = [
    "ProxyService",
    "UpstreamExchange",
    "is_event_stream",
]
