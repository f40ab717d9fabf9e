"""
SSE Line Parsing

Splits an upstream event-stream into lines and extracts the JSON payloads
carried by `data:` lines.
"""

from __future__ import annotations

import codecs
import json
import re
from typing import Any, Optional

_LINE_SPLIT = re.compile(r"\r?\n")


class SSELineParser:
    """
    Line-based SSE parser with one carry-over buffer.

    - Chunks may end mid-line or mid-character; the incomplete tail is kept for the next chunk
    - Supports LF and CRLF line endings
    - Only `data:` lines are used; `event:`, `id:`, `retry:` and comments are discarded
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    @property
    def pending(self) -> str:
        """The incomplete trailing line"""
        return self._pending

    def feed(self, chunk: bytes) -> list[str]:
        """
        Append bytes and return the lines completed by them.
        """
        if not chunk:
            return []

        text = self._pending + self._decoder.decode(chunk)
        lines = _LINE_SPLIT.split(text)
        self._pending = lines.pop()
        return lines

    def frames(self, chunk: bytes) -> list[Any]:
        """
        Append bytes and return the JSON values of the completed `data:` lines.

        Payloads that are not valid JSON are skipped.
        """
        frames: list[Any] = []
        for line in self.feed(chunk):
            payload = extract_data_payload(line)
            if payload is None:
                continue
            try:
                frames.append(json.loads(payload))
            except json.JSONDecodeError:
                continue
        return frames


def extract_data_payload(line: str) -> Optional[str]:
    """Return the stripped payload of a `data:` line, or None for any other line."""
    if not line.startswith("data:"):
        return None
    return line[5:].strip()
