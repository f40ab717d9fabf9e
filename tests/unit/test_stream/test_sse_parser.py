"""
SSE Line Parser Unit Tests
"""

from sse_gateway.stream.sse import SSELineParser, extract_data_payload


def test_lines_split_across_chunks_are_reassembled():
    parser = SSELineParser()
    assert parser.feed(b'data: {"a"') == []
    assert parser.pending == 'data: {"a"'
    assert parser.feed(b':1}\n\n') == ['data: {"a":1}', ""]
    assert parser.pending == ""


def test_crlf_line_endings():
    parser = SSELineParser()
    lines = parser.feed(b"data: 1\r\ndata: 2\r\n")
    assert lines == ["data: 1", "data: 2"]


def test_multibyte_character_split_across_chunks():
    parser = SSELineParser()
    encoded = 'data: {"t":"привет"}\n'.encode("utf-8")
    # split inside the two-byte sequence of the first cyrillic letter
    cut = encoded.index("п".encode("utf-8")) + 1
    frames = parser.frames(encoded[:cut]) + parser.frames(encoded[cut:])
    assert frames == [{"t": "привет"}]


def test_only_data_lines_yield_frames():
    parser = SSELineParser()
    chunk = (
        b"event: message\n"
        b"id: 7\n"
        b"retry: 1000\n"
        b": comment\n"
        b'data: {"ok":true}\n\n'
    )
    assert parser.frames(chunk) == [{"ok": True}]


def test_non_json_payloads_are_skipped():
    parser = SSELineParser()
    chunk = b"data: [DONE]x\ndata: hello\ndata: 42\n"
    assert parser.frames(chunk) == [42]


def test_incomplete_trailing_line_is_not_emitted():
    parser = SSELineParser()
    assert parser.frames(b'data: {"n":1}') == []
    assert parser.frames(b"\n") == [{"n": 1}]


def test_empty_chunk():
    parser = SSELineParser()
    assert parser.feed(b"") == []


def test_extract_data_payload_strips_whitespace():
    assert extract_data_payload("data:   {\"x\":1}  ") == '{"x":1}'
    assert extract_data_payload("data:") == ""
    assert extract_data_payload(" data: 1") is None
    assert extract_data_payload("event: data") is None
