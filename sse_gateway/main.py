"""
SSE Gateway Application Entry Point

FastAPI application factory, router registration and the uvicorn launcher.
"""

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from sse_gateway import __version__
from sse_gateway.api import proxy_router, register_health_routes
from sse_gateway.common.errors import AppError
from sse_gateway.config import Settings, get_settings
from sse_gateway.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the gateway application

    Args:
        settings: Gateway settings, defaults to the process-wide configuration

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="HTTP forwarding gateway with Server-Sent-Events aggregation",
        version=__version__,
    )
    app.state.settings = settings

    # Configure CORS
    if settings.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """
        Handle gateway errors

        The error message is the plain-text response body.
        """
        log = logger.warning if exc.status_code >= 500 else logger.info
        log(
            "%s %s -> %s %s: %s %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
            exc.message,
            exc.details or "",
        )
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """
        Handle uncaught exceptions

        Details are logged, and only returned to the client in debug mode.
        """
        logger.error(
            "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
            str(exc),
            request.url.path,
            traceback.format_exc(),
        )
        if settings.DEBUG:
            return PlainTextResponse(f"{type(exc).__name__}: {exc}", status_code=500)
        return PlainTextResponse("Internal server error", status_code=500)

    register_health_routes(app, settings)
    app.include_router(proxy_router)
    return app


# Initialize logging configuration
setup_logging()

app = create_app()


def run() -> None:
    """Console entry point: serve the gateway on LISTEN_HOST:LISTEN_PORT"""
    import uvicorn

    settings = get_settings()
    logger.info(
        "sse-gateway listening on http://%s:%s",
        settings.LISTEN_HOST,
        settings.LISTEN_PORT,
    )
    uvicorn.run(
        app,
        host=settings.LISTEN_HOST,
        port=settings.LISTEN_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
