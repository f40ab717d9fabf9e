"""
SSE Limit Enforcement

Tracks the bytes received and the time elapsed since dispatch against the
configured ceilings. Both triggers converge on one abort reason; the policy
that answers it (413, 504 or close) is applied in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sse_gateway.common.timer import Timer
from sse_gateway.config import Settings


class AbortReason(str, Enum):
    BODY_BYTES = "body_bytes"
    DURATION = "duration"


@dataclass(frozen=True)
class StreamLimits:
    # 0 disables
    max_body_bytes: int = 0
    # 0 disables
    max_duration_sec: float = 0
    on_limit: str = "413"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StreamLimits":
        return cls(
            max_body_bytes=settings.SSE_MAX_BODY_BYTES,
            max_duration_sec=settings.SSE_MAX_DURATION_SEC,
            on_limit=settings.ON_LIMIT,
        )


class LimitEnforcer:
    """Observes every chunk of one exchange."""

    def __init__(self, limits: StreamLimits, timer: Timer) -> None:
        self.limits = limits
        self.timer = timer
        self.byte_total = 0

    def observe(self, chunk: bytes) -> Optional[AbortReason]:
        self.byte_total += len(chunk)
        return self.check_limits()

    def check_limits(self) -> Optional[AbortReason]:
        limits = self.limits
        if limits.max_body_bytes > 0 and self.byte_total > limits.max_body_bytes:
            return AbortReason.BODY_BYTES
        if limits.max_duration_sec > 0 and self.timer.elapsed_seconds > limits.max_duration_sec:
            return AbortReason.DURATION
        return None

    def abort_status(self, upstream_status: int) -> int:
        """
        Status of the inbound response after an abort

        `close` keeps the upstream status and truncates the body.
        """
        if self.limits.on_limit == "413":
            return 413
        if self.limits.on_limit == "504":
            return 504
        return upstream_status
