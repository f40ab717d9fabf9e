"""
SSE Stream Processing Module Initialization
"""

from sse_gateway.stream.aggregators import (
    AGGREGATION_MODES,
    FinalTextAggregator,
    RawAggregator,
    SmartAggregator,
    StreamAggregator,
    create_aggregator,
    extract_assistant_text,
)
from sse_gateway.stream.limits import AbortReason, LimitEnforcer, StreamLimits
from sse_gateway.stream.sse import SSELineParser, extract_data_payload

__all__ = [
    "AGGREGATION_MODES",
    "AbortReason",
    "FinalTextAggregator",
    "LimitEnforcer",
    "RawAggregator",
    "SSELineParser",
    "SmartAggregator",
    "StreamAggregator",
    "StreamLimits",
    "create_aggregator",
    "extract_assistant_text",
    "extract_data_payload",
]
