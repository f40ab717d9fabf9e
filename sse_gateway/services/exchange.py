"""
Upstream Exchange

Owns the single outbound connection made for one inbound request: dispatch,
response classification, passthrough relay and SSE aggregation.
"""

import logging
from collections.abc import AsyncIterator
from typing import Optional

import anyio
import httpx

from sse_gateway.common.errors import (
    UpstreamConnectionError,
    UpstreamStreamError,
    ValidationError,
)
from sse_gateway.common.http_client import create_upstream_client, encode_body
from sse_gateway.common.policy import resolve_tls_verify
from sse_gateway.common.proxy_headers import passthrough_headers, prepare_request_headers
from sse_gateway.common.sanitizer import sanitize_headers
from sse_gateway.common.timer import Timer
from sse_gateway.common.utils import generate_trace_id
from sse_gateway.config import Settings
from sse_gateway.domain.request import GatewayResponse, ProxyRequestSpec
from sse_gateway.stream.aggregators import create_aggregator
from sse_gateway.stream.limits import LimitEnforcer, StreamLimits

logger = logging.getLogger(__name__)

EVENT_STREAM_CONTENT_TYPE = "text/event-stream"
SSE_READ_TIMEOUT_MESSAGE = "SSE read timeout"


def is_event_stream(content_type: Optional[str]) -> bool:
    """Whether an upstream content-type selects the aggregation path"""
    return EVENT_STREAM_CONTENT_TYPE in (content_type or "").lower()


def _error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class UpstreamExchange:
    """
    One outbound request and its response.

    Not shared, not reused: the client is created in `open()` and closed exactly once,
    on upstream end, error or abort.
    """

    def __init__(
        self,
        spec: ProxyRequestSpec,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        trace_id: Optional[str] = None,
    ):
        self.spec = spec
        self.settings = settings
        self.transport = transport
        self.trace_id = trace_id or generate_trace_id()
        self.timer = Timer()
        self._client: Optional[httpx.AsyncClient] = None
        self._response: Optional[httpx.Response] = None
        self._closed = False

    @property
    def response(self) -> httpx.Response:
        if self._response is None:
            raise RuntimeError("exchange is not open")
        return self._response

    async def open(self) -> httpx.Response:
        """
        Send the request and wait for the upstream response headers

        Single attempt, no retry.

        Raises:
            UpstreamConnectionError: Connect/TLS/timeout failure before headers
        """
        spec = self.spec
        timeout = spec.timeout if spec.timeout is not None else self.settings.REQUEST_TIMEOUT_DEFAULT
        verify = resolve_tls_verify(self.settings, spec.reject_unauthorized)

        headers = prepare_request_headers(spec.headers)
        self.timer.start()
        self._client = create_upstream_client(timeout, verify, self.transport)
        logger.debug(
            "[%s] Upstream request: method=%s url=%s timeout=%s headers=%s",
            self.trace_id,
            spec.method,
            spec.url,
            timeout,
            sanitize_headers(headers),
        )
        try:
            request = self._client.build_request(
                method=spec.method,
                url=spec.url,
                headers=headers,
                content=encode_body(spec.body),
            )
            self._response = await self._client.send(request, stream=True)
        except httpx.InvalidURL as e:
            await self.close()
            raise ValidationError(code="invalid_url", details={"error": str(e)})
        except httpx.HTTPError as e:
            await self.close()
            logger.warning(
                "[%s] Upstream connection failed: url=%s error=%s",
                self.trace_id,
                spec.url,
                _error_message(e),
            )
            raise UpstreamConnectionError(message=_error_message(e))
        except BaseException:
            await self.close()
            raise

        self.timer.mark_first_byte()
        return self._response

    async def close(self) -> None:
        """Tear down the upstream connection (no graceful half-close)"""
        if self._closed:
            return
        self._closed = True
        self.timer.stop()
        if self._response is not None:
            await self._response.aclose()
        if self._client is not None:
            await self._client.aclose()

    def passthrough(self) -> GatewayResponse:
        """
        Relay status, headers and the undecoded body as a stream
        """
        response = self.response
        return GatewayResponse(
            status_code=response.status_code,
            raw_headers=passthrough_headers(response.headers.raw),
            stream=self._relay(),
        )

    async def _relay(self) -> AsyncIterator[bytes]:
        relayed = 0
        try:
            async for chunk in self.response.aiter_raw():
                relayed += len(chunk)
                yield chunk
        except httpx.HTTPError as e:
            # Headers are already committed; the caller sees a truncated body
            logger.warning(
                "[%s] Upstream stream error after headers were sent, truncating response: url=%s error=%s",
                self.trace_id,
                self.spec.url,
                _error_message(e),
            )
        finally:
            await self.close()
            logger.info(
                "[%s] Passthrough finished: url=%s status=%s bytes=%d ttfb_ms=%s total_ms=%s",
                self.trace_id,
                self.spec.url,
                self.response.status_code,
                relayed,
                self.timer.first_byte_delay_ms,
                self.timer.total_time_ms,
            )

    async def aggregate(self) -> GatewayResponse:
        """
        Read the event-stream to completion (or abort) and build one response body

        Raises:
            UpstreamStreamError: Stream failure or SSE read timeout
        """
        response = self.response
        mode = self.spec.aggregation_mode or self.settings.SSE_AGGREGATION_MODE
        content_type = self.spec.response_content_type or self.settings.SSE_RESPONSE_CONTENT_TYPE
        aggregator = create_aggregator(mode)
        enforcer = LimitEnforcer(StreamLimits.from_settings(self.settings), self.timer)
        read_timeout = self.settings.SSE_READ_TIMEOUT_DEFAULT or None

        abort_reason = None
        try:
            # Armed once at connection establishment, not reset per chunk
            with anyio.fail_after(read_timeout):
                async for chunk in response.aiter_bytes():
                    aggregator.feed(chunk)
                    abort_reason = enforcer.observe(chunk)
                    if abort_reason is not None:
                        break
        except TimeoutError:
            logger.warning(
                "[%s] SSE read timeout after %ss: url=%s", self.trace_id, read_timeout, self.spec.url
            )
            raise UpstreamStreamError(message=SSE_READ_TIMEOUT_MESSAGE)
        except httpx.HTTPError as e:
            logger.warning(
                "[%s] Upstream stream error: url=%s error=%s",
                self.trace_id,
                self.spec.url,
                _error_message(e),
            )
            raise UpstreamStreamError(message=_error_message(e))
        finally:
            await self.close()

        headers = [(b"content-type", content_type.encode("latin-1"))]
        if abort_reason is not None:
            status_code = enforcer.abort_status(response.status_code)
            logger.info(
                "[%s] SSE limit reached (%s), upstream closed: url=%s policy=%s status=%s bytes=%d elapsed_ms=%s",
                self.trace_id,
                abort_reason.value,
                self.spec.url,
                enforcer.limits.on_limit,
                status_code,
                enforcer.byte_total,
                self.timer.total_time_ms,
            )
            return GatewayResponse(status_code=status_code, raw_headers=headers)

        body = aggregator.finalize()
        logger.info(
            "[%s] SSE aggregated: url=%s mode=%s status=%s upstream_bytes=%d body_bytes=%d ttfb_ms=%s total_ms=%s",
            self.trace_id,
            self.spec.url,
            mode,
            response.status_code,
            enforcer.byte_total,
            len(body),
            self.timer.first_byte_delay_ms,
            self.timer.total_time_ms,
        )
        return GatewayResponse(status_code=response.status_code, raw_headers=headers, body=body)
