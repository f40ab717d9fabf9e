"""
Test Configuration Module
"""

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from typing import Any, Optional

import httpx
import pytest
import pytest_asyncio

from sse_gateway.api.deps import get_proxy_service
from sse_gateway.config import Settings
from sse_gateway.main import create_app
from sse_gateway.services import ProxyService


def build_settings(**overrides: Any) -> Settings:
    """Settings isolated from .env, with limits off unless a test turns them on"""
    values: dict[str, Any] = {
        "UPSTREAM_ALLOWED_HOSTS": "",
        "REQUEST_TIMEOUT_DEFAULT": 5,
        "SSE_READ_TIMEOUT_DEFAULT": 0,
        "SSE_MAX_BODY_BYTES": 0,
        "SSE_MAX_DURATION_SEC": 0,
        "ON_LIMIT": "413",
        "SSE_AGGREGATION_MODE": "raw",
        "SSE_RESPONSE_CONTENT_TYPE": "text/plain; charset=utf-8",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def encode_sse_frame(payload: Any) -> bytes:
    if not isinstance(payload, str):
        payload = json.dumps(payload)
    return f"data: {payload}\n\n".encode("utf-8")


class FakeUpstream:
    """
    In-process stand-in for the upstream test server.

    Default routes mirror it: `POST /json` echoes the body, `GET /sse` emits three
    `data: {"n": i, ...}` frames.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.chunks_sent = 0
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {
            "/json": self._echo,
            "/sse": lambda request: self.sse_response(
                [encode_sse_frame({"n": i, "msg": f"hello #{i}"}) for i in range(1, 4)]
            ),
        }

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def route(self, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[path] = handler

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(
                404,
                headers={"Content-Type": "text/plain; charset=utf-8"},
                content=self.stream([b"not found"]),
            )
        return handler(request)

    def _echo(self, request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            headers={"Content-Type": "application/json; charset=utf-8"},
            content=self.stream(
                [json.dumps({"ok": True, "echo": request.content.decode("utf-8")}).encode("utf-8")]
            ),
        )

    def sse_response(
        self,
        chunks: list[bytes],
        delay: float = 0,
        status_code: int = 200,
        content_type: str = "text/event-stream",
        error: Optional[Exception] = None,
    ) -> httpx.Response:
        return httpx.Response(
            status_code,
            headers={"Content-Type": content_type, "Cache-Control": "no-cache"},
            content=self.stream(chunks, delay=delay, error=error),
        )

    async def stream(
        self,
        chunks: list[bytes],
        delay: float = 0,
        error: Optional[Exception] = None,
    ) -> AsyncIterator[bytes]:
        for chunk in chunks:
            if delay:
                await asyncio.sleep(delay)
            self.chunks_sent += 1
            yield chunk
        if error is not None:
            raise error


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    return build_settings


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest_asyncio.fixture
async def gateway_client(fake_upstream):
    """Factory building the gateway app with settings overrides, wired to the fake upstream"""
    clients: list[httpx.AsyncClient] = []

    def factory(**overrides: Any) -> httpx.AsyncClient:
        settings = build_settings(**overrides)
        app = create_app(settings)
        app.dependency_overrides[get_proxy_service] = lambda: ProxyService(
            settings, transport=fake_upstream.transport
        )
        client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://gateway",
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()
