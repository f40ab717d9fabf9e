"""
Timer Module

Measures exchange latency (time to first byte, total time) and the elapsed
time checked by the SSE duration ceiling.
"""

import time
from typing import Optional


class Timer:
    """
    High-precision Timer

    Uses time.perf_counter(), so elapsed values are not affected by system clock adjustments.

    Example:
        timer = Timer().start()
        # ... Send request ...
        timer.mark_first_byte()
        # ... Receive full response ...
        timer.stop()
        print(f"TTFB: {timer.first_byte_delay_ms}ms")
        print(f"Total: {timer.total_time_ms}ms")
    """

    def __init__(self):
        self._start_time: Optional[float] = None
        self._first_byte_time: Optional[float] = None
        self._end_time: Optional[float] = None

    def start(self) -> "Timer":
        """
        Start timing

        Returns:
            Timer: Returns self for chaining
        """
        self._start_time = time.perf_counter()
        self._first_byte_time = None
        self._end_time = None
        return self

    def mark_first_byte(self) -> "Timer":
        """
        Mark first byte time

        Subsequent calls are ignored if already marked.
        """
        if self._first_byte_time is None:
            self._first_byte_time = time.perf_counter()
        return self

    def stop(self) -> "Timer":
        """Stop timing"""
        if self._end_time is None:
            self._end_time = time.perf_counter()
        if self._first_byte_time is None:
            self._first_byte_time = self._end_time
        return self

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since start (up to stop, if stopped)"""
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else time.perf_counter()
        return end - self._start_time

    @property
    def first_byte_delay_ms(self) -> Optional[int]:
        if self._start_time is None or self._first_byte_time is None:
            return None
        return int((self._first_byte_time - self._start_time) * 1000)

    @property
    def total_time_ms(self) -> Optional[int]:
        if self._start_time is None or self._end_time is None:
            return None
        return int((self._end_time - self._start_time) * 1000)
