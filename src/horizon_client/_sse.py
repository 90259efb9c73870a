"""
Server-Sent Events (SSE) decoding.

Frames are decoded incrementally from raw body bytes:
- `id`, `event` and `data` fields build up a message, dispatched on a blank line
- `retry` fields are reported as soon as they are read
- lines starting with `:` are comments

A frame that is not terminated by a blank line when the body ends is dropped;
the server redelivers it after a reconnect with `Last-Event-Id`.
"""

import codecs
from collections.abc import Iterator

from horizon_client._errors import StreamDecodeError
from horizon_client._types import DEFAULT_EVENT_NAME, SSEFrame, SSEMessage, SSERetry

_BOM = "\ufeff"


class SSEDecoder:
    """
    Incremental SSE decoder.

    Maintains state for decoding SSE frames from a byte stream. Bytes must be
    valid UTF-8; anything else raises StreamDecodeError.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")("strict")
        self._buffer = ""
        self._started = False
        self._event: str | None = None
        self._id: str | None = None
        self._data: list[str] = []

    def feed(self, chunk: bytes) -> list[SSEFrame]:
        """
        Feed a chunk of body bytes and return any complete frames.

        Args:
            chunk: Raw bytes from the response body

        Returns:
            List of complete frames, in stream order

        Raises:
            StreamDecodeError: If the bytes are not valid UTF-8
        """
        try:
            text = self._decoder.decode(chunk)
        except UnicodeDecodeError as e:
            raise StreamDecodeError(f"Invalid UTF-8 in event stream: {e.reason}") from e
        return self._feed_text(text)

    def finish(self) -> list[SSEFrame]:
        """
        Finish decoding at end of body.

        Complete lines still buffered are processed; an unterminated frame is
        discarded.

        Raises:
            StreamDecodeError: If the body ends inside a UTF-8 sequence
        """
        try:
            text = self._decoder.decode(b"", final=True)
        except UnicodeDecodeError as e:
            raise StreamDecodeError(f"Truncated UTF-8 in event stream: {e.reason}") from e

        frames = self._feed_text(text)
        self._buffer = ""
        self._reset()
        return frames

    def _feed_text(self, text: str) -> list[SSEFrame]:
        if not self._started and text:
            self._started = True
            if text.startswith(_BOM):
                text = text[1:]

        self._buffer += text
        frames: list[SSEFrame] = []

        # Process complete lines
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)

            # Strip trailing CR if present
            if line.endswith("\r"):
                line = line[:-1]

            # Empty line signals end of frame
            if line == "":
                message = self._emit_message()
                if message is not None:
                    frames.append(message)
                continue

            retry = self._process_line(line)
            if retry is not None:
                frames.append(retry)

        return frames

    def _process_line(self, line: str) -> SSERetry | None:
        if line.startswith(":"):
            return None

        name, sep, value = line.partition(":")
        # Strip the optional space after the colon
        if sep and value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        elif name == "id":
            if "\0" not in value:
                self._id = value
        elif name == "retry":
            if value.isascii() and value.isdigit():
                return SSERetry(retry_ms=int(value))
        # Unknown fields are ignored
        return None

    def _emit_message(self) -> SSEMessage | None:
        if not self._data:
            self._reset()
            return None

        message = SSEMessage(
            event=self._event or DEFAULT_EVENT_NAME,
            data="\n".join(self._data),
            id=self._id,
        )
        self._reset()
        return message

    def _reset(self) -> None:
        """Reset decoder state for next frame."""
        self._event = None
        self._id = None
        self._data = []


def parse_sse_sync(byte_iterator: Iterator[bytes]) -> Iterator[SSEFrame]:
    """
    Decode SSE frames from a synchronous byte iterator.

    Args:
        byte_iterator: Iterator yielding body bytes

    Yields:
        Decoded frames

    Raises:
        StreamDecodeError: On malformed framing
    """
    decoder = SSEDecoder()

    for chunk in byte_iterator:
        yield from decoder.feed(chunk)

    yield from decoder.finish()
