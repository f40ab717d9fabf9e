"""
Health Check Endpoints
"""

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from sse_gateway.config import Settings


async def healthz():
    """Liveness probe"""
    return PlainTextResponse("ok")


async def ready():
    """Readiness probe"""
    return PlainTextResponse("ready")


def register_health_routes(app: FastAPI, settings: Settings) -> None:
    """Mount the health routes on their configured paths, if enabled"""
    if not settings.HEALTH_ENABLED:
        return
    app.add_api_route(settings.HEALTH_PATH_HEALTHZ, healthz, methods=["GET"], tags=["Health"])
    app.add_api_route(settings.HEALTH_PATH_READY, ready, methods=["GET"], tags=["Health"])
