"""
API Dependency Injection Module

Provides the dependencies required by the FastAPI routes.
"""

from typing import Annotated

from fastapi import Depends, Request

from sse_gateway.config import Settings
from sse_gateway.services import ProxyService


def get_gateway_settings(request: Request) -> Settings:
    """Settings the application was created with"""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_gateway_settings)]


def get_proxy_service(settings: SettingsDep) -> ProxyService:
    """Create the proxy service (stateless, one per request)"""
    return ProxyService(settings)


ProxyServiceDep = Annotated[ProxyService, Depends(get_proxy_service)]
