"""
SSE Limit Enforcer Unit Tests
"""

from unittest.mock import MagicMock

import pytest

from sse_gateway.common.timer import Timer
from sse_gateway.stream.limits import AbortReason, LimitEnforcer, StreamLimits


def fake_timer(elapsed: float) -> Timer:
    timer = MagicMock(spec=Timer)
    timer.elapsed_seconds = elapsed
    return timer


class TestLimitEnforcer:
    def test_byte_ceiling_is_exclusive(self):
        enforcer = LimitEnforcer(StreamLimits(max_body_bytes=10), fake_timer(0))
        assert enforcer.observe(b"x" * 10) is None
        assert enforcer.observe(b"x") is AbortReason.BODY_BYTES
        assert enforcer.byte_total == 11

    def test_duration_ceiling(self):
        enforcer = LimitEnforcer(StreamLimits(max_duration_sec=1), fake_timer(1.5))
        assert enforcer.observe(b"x") is AbortReason.DURATION

    def test_zero_disables_both_limits(self):
        enforcer = LimitEnforcer(StreamLimits(max_body_bytes=0, max_duration_sec=0), fake_timer(10_000))
        assert enforcer.observe(b"x" * 1_000_000) is None

    def test_byte_breach_reported_before_duration(self):
        limits = StreamLimits(max_body_bytes=1, max_duration_sec=1)
        enforcer = LimitEnforcer(limits, fake_timer(5))
        assert enforcer.observe(b"xx") is AbortReason.BODY_BYTES

    @pytest.mark.parametrize(
        "policy,expected",
        [("413", 413), ("504", 504), ("close", 200)],
    )
    def test_abort_status(self, policy, expected):
        enforcer = LimitEnforcer(StreamLimits(on_limit=policy), fake_timer(0))
        assert enforcer.abort_status(200) == expected

    def test_limits_from_settings(self, make_settings):
        settings = make_settings(SSE_MAX_BODY_BYTES=99, SSE_MAX_DURATION_SEC=3, ON_LIMIT="close")
        limits = StreamLimits.from_settings(settings)
        assert limits == StreamLimits(max_body_bytes=99, max_duration_sec=3, on_limit="close")


class TestTimer:
    def test_elapsed_before_start(self):
        assert Timer().elapsed_seconds == 0.0

    def test_stop_freezes_elapsed(self):
        timer = Timer().start()
        timer.stop()
        elapsed = timer.elapsed_seconds
        assert timer.elapsed_seconds == elapsed
        assert timer.total_time_ms is not None
        assert timer.first_byte_delay_ms is not None
