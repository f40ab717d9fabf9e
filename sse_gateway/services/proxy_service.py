"""Proxy Core Service Module

Runs one inbound proxy request: policy check, dispatch, classification and
either passthrough or SSE aggregation."""

import logging
from typing import Optional

import httpx

from sse_gateway.common.policy import check_upstream_url
from sse_gateway.common.utils import generate_trace_id
from sse_gateway.config import Settings
from sse_gateway.domain.request import GatewayResponse, ProxyRequestSpec
from sse_gateway.services.exchange import UpstreamExchange, is_event_stream

logger = logging.getLogger(__name__)


class ProxyService:
    """
    Proxy Service

    Stateless between requests; every call to `forward` owns exactly one UpstreamExchange.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Service

        Args:
            settings: Gateway settings (read-only)
            transport: Optional httpx transport for outbound requests
        """
        self.settings = settings
        self.transport = transport

    async def forward(self, spec: ProxyRequestSpec) -> GatewayResponse:
        """
        Forward a proxy request to its upstream

        Args:
            spec: Validated proxy request

        Returns:
            GatewayResponse: Streamed passthrough, or the aggregated SSE body

        Raises:
            ValidationError: Invalid upstream URL
            PolicyError: Upstream host not allowed
            UpstreamConnectionError: Failure before upstream headers
            UpstreamStreamError: Failure while aggregating the event-stream
        """
        trace_id = generate_trace_id()
        check_upstream_url(spec.url, self.settings)

        exchange = UpstreamExchange(spec, self.settings, self.transport, trace_id=trace_id)
        upstream = await exchange.open()

        content_type = upstream.headers.get("content-type")
        if not is_event_stream(content_type):
            logger.debug(
                "[%s] Passthrough: %s %s -> %s (%s)",
                trace_id,
                spec.method,
                spec.url,
                upstream.status_code,
                content_type,
            )
            return exchange.passthrough()

        logger.debug(
            "[%s] SSE aggregation: %s %s -> %s",
            trace_id,
            spec.method,
            spec.url,
            upstream.status_code,
        )
        return await exchange.aggregate()
