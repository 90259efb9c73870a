"""Tests for SSE decoding."""

import pytest

from horizon_client._errors import StreamDecodeError
from horizon_client._sse import SSEDecoder, parse_sse_sync
from horizon_client._types import SSEMessage, SSERetry


class TestSSEDecoder:
    """Tests for SSEDecoder."""

    def test_parses_message(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b'id: 1\nevent: message\ndata: {"x": 1}\n\n')
        assert frames == [SSEMessage(event="message", data='{"x": 1}', id="1")]

    def test_fields_without_space(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b'id:1\nevent:message\ndata:{"x":1}\n\n')
        assert frames == [SSEMessage(event="message", data='{"x":1}', id="1")]

    def test_event_name_defaults_to_message(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"data: hello\n\n")
        assert frames == [SSEMessage(event="message", data="hello", id=None)]

    def test_keeps_custom_event_name(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"event: heartbeat\ndata: ping\n\n")
        assert len(frames) == 1
        assert isinstance(frames[0], SSEMessage)
        assert frames[0].event == "heartbeat"

    def test_parses_multiline_data(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"data: line1\ndata: line2\n\n")
        assert frames[0].data == "line1\nline2"  # type: ignore[union-attr]

    def test_parses_multiple_events(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"id: 1\ndata: first\n\nid: 2\ndata: second\n\n")
        assert [f.id for f in frames] == ["1", "2"]  # type: ignore[union-attr]
        assert [f.data for f in frames] == ["first", "second"]  # type: ignore[union-attr]

    def test_id_does_not_carry_over(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"id: 1\ndata: first\n\ndata: second\n\n")
        assert frames[1].id is None  # type: ignore[union-attr]

    def test_handles_partial_data(self) -> None:
        decoder = SSEDecoder()

        assert decoder.feed(b"id: 7\n") == []
        assert decoder.feed(b"data: hel") == []
        assert decoder.feed(b"lo\n") == []

        frames = decoder.feed(b"\n")
        assert frames == [SSEMessage(event="message", data="hello", id="7")]

    def test_frame_without_data_is_not_dispatched(self) -> None:
        decoder = SSEDecoder()
        assert decoder.feed(b"event: message\nid: 3\n\n") == []

    def test_empty_data_line_is_dispatched(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"data:\n\n")
        assert frames == [SSEMessage(event="message", data="")]

    def test_retry_is_reported_immediately(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"retry: 1500\n")
        assert frames == [SSERetry(retry_ms=1500)]

    def test_invalid_retry_is_ignored(self) -> None:
        decoder = SSEDecoder()
        assert decoder.feed(b"retry: soon\n\n") == []

    def test_ignores_comments_and_unknown_fields(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b": keep-alive\nfoo: bar\ndata: hello\n\n")
        assert frames == [SSEMessage(event="message", data="hello")]

    def test_id_with_nul_is_ignored(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"id: a\x00b\ndata: x\n\n")
        assert frames[0].id is None  # type: ignore[union-attr]

    def test_handles_carriage_return(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed(b"id: 1\r\ndata: hello\r\n\r\n")
        assert frames == [SSEMessage(event="message", data="hello", id="1")]

    def test_strips_leading_bom(self) -> None:
        decoder = SSEDecoder()
        frames = decoder.feed("\ufeffdata: hello\n\n".encode())
        assert frames == [SSEMessage(event="message", data="hello")]

    def test_finish_drops_unterminated_frame(self) -> None:
        decoder = SSEDecoder()
        assert decoder.feed(b"id: 9\ndata: partial\n") == []
        assert decoder.finish() == []

    def test_invalid_utf8_raises(self) -> None:
        decoder = SSEDecoder()
        with pytest.raises(StreamDecodeError) as exc_info:
            decoder.feed(b"data: \xff\xfe\n\n")
        assert exc_info.value.code == "SSE_DECODE"

    def test_truncated_utf8_at_end_raises(self) -> None:
        decoder = SSEDecoder()
        decoder.feed(b"data: " + "€".encode()[:2])
        with pytest.raises(StreamDecodeError):
            decoder.finish()


class TestParseSseSync:
    """Tests for parse_sse_sync."""

    def test_parses_byte_iterator(self) -> None:
        chunks = [b"id: 1\n", b"event: message\n", b'data: {"x": 1}\n', b"\n"]

        frames = list(parse_sse_sync(iter(chunks)))
        assert frames == [SSEMessage(event="message", data='{"x": 1}', id="1")]

    def test_handles_multibyte_utf8_split_across_chunks(self) -> None:
        """
        Regression test: multibyte UTF-8 characters split across chunk boundaries.

        The Euro sign is encoded as 3 bytes: 0xE2 0x82 0xAC
        """
        euro_bytes = "€".encode()
        assert len(euro_bytes) == 3

        chunks = [
            b"data: price " + euro_bytes[:1],
            euro_bytes[1:] + b"100\n",
            b"\n",
        ]

        frames = list(parse_sse_sync(iter(chunks)))
        assert frames == [SSEMessage(event="message", data="price €100")]

    def test_interleaves_retry_and_messages_in_order(self) -> None:
        chunks = [b"data: a\n\nretry: 10\n", b"data: b\n\n"]

        frames = list(parse_sse_sync(iter(chunks)))
        assert frames == [
            SSEMessage(event="message", data="a"),
            SSERetry(retry_ms=10),
            SSEMessage(event="message", data="b"),
        ]
