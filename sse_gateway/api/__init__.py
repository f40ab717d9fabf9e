"""
API Router Module Initialization
"""

from sse_gateway.api.health import register_health_routes
from sse_gateway.api.proxy import router as proxy_router

__all__ = [
    "proxy_router",
    "register_health_routes",
]
