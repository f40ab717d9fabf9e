"""
SSE Aggregation Strategies

Reduce an upstream event-stream to one response body. One strategy is chosen
per exchange:

- raw: the received bytes, concatenated verbatim
- final-text: the assistant text, treating each frame as either a cumulative
  snapshot (length did not shrink) or a delta (length shrank)
- smart: keeps whichever of {new text, previous + new text} is longer
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from sse_gateway.stream.sse import SSELineParser

AGGREGATION_MODES = ("raw", "final-text", "smart")


def extract_assistant_text(frame: Any) -> Optional[str]:
    """
    Return `content.text` of an assistant frame.

    Frames look like `{"role": "assistant", "finished": false, "content": {"text": "..."}}`.
    Anything else (other roles, missing or non-string text, non-object payloads) yields None.
    The `finished` flag is not consulted.
    """
    if not isinstance(frame, dict) or frame.get("role") != "assistant":
        return None
    content = frame.get("content")
    if not isinstance(content, dict):
        return None
    text = content.get("text")
    if not isinstance(text, str):
        return None
    return text


class StreamAggregator(ABC):
    """Consumes an event-stream chunk by chunk and produces the aggregated body once."""

    mode: str = ""

    def __init__(self) -> None:
        self._parser = SSELineParser()

    def feed(self, chunk: bytes) -> None:
        for frame in self._parser.frames(chunk):
            self.consume(frame)

    def consume(self, frame: Any) -> None:
        text = extract_assistant_text(frame)
        if text is not None:
            self.consume_text(text)

    def consume_text(self, text: str) -> None:
        pass

    @abstractmethod
    def finalize(self) -> bytes:
        pass


class RawAggregator(StreamAggregator):
    """Retains the whole stream in memory and returns it unmodified."""

    mode = "raw"

    def __init__(self) -> None:
        super().__init__()
        self._chunks: list[bytes] = []

    def feed(self, chunk: bytes) -> None:
        self._chunks.append(chunk)

    def finalize(self) -> bytes:
        return b"".join(self._chunks)


class FinalTextAggregator(StreamAggregator):
    mode = "final-text"

    def __init__(self) -> None:
        super().__init__()
        self.final_text = ""
        self.cumulative_len = 0

    def consume_text(self, text: str) -> None:
        if len(text) >= self.cumulative_len:
            # cumulative snapshot
            self.final_text = text
        else:
            # delta
            self.final_text += text
        self.cumulative_len = len(self.final_text)

    def finalize(self) -> bytes:
        return self.final_text.encode("utf-8")


class SmartAggregator(StreamAggregator):
    mode = "smart"

    def __init__(self) -> None:
        super().__init__()
        self.smart_text = ""

    def consume_text(self, text: str) -> None:
        if len(text) >= len(self.smart_text):
            self.smart_text = text
        else:
            self.smart_text = self.smart_text + text

    def finalize(self) -> bytes:
        return self.smart_text.encode("utf-8")


_AGGREGATORS: dict[str, type[StreamAggregator]] = {
    RawAggregator.mode: RawAggregator,
    FinalTextAggregator.mode: FinalTextAggregator,
    SmartAggregator.mode: SmartAggregator,
}


def create_aggregator(mode: str) -> StreamAggregator:
    """
    Create the aggregation strategy for a mode

    Raises:
        ValueError: Unknown mode
    """
    try:
        return _AGGREGATORS[mode]()
    except KeyError:
        raise ValueError(f"Unsupported aggregation mode: {mode}")
