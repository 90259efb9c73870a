"""
EventStream - blocking, resumable SSE event stream.

Iterating an EventStream yields typed events forever, reconnecting with
``Last-Event-Id`` whenever a connection ends. Errors are raised from
``next()``; the stream stays usable and reconnects on the following call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, TypeVar

import httpx

from horizon_client._base import transport_error
from horizon_client._errors import StreamDecodeError, TransportError
from horizon_client._sse import parse_sse_sync
from horizon_client._state import (
    SKIP,
    AwaitingEvent,
    EventStreamBase,
    NeedConnection,
)
from horizon_client._types import SSEFrame
from horizon_client.request import StreamRequest

if TYPE_CHECKING:
    from horizon_client.client import HorizonClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _FrameReader:
    """Blocking frame decoder over one open response."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self._frames = parse_sse_sync(response.iter_bytes())

    def next_frame(self) -> SSEFrame | None:
        """
        Return the next frame, or None once the body has ended.

        Raises:
            StreamDecodeError: On malformed framing or body encoding
            TransportError: If reading the body fails
        """
        try:
            return next(self._frames)
        except StopIteration:
            return None
        except httpx.TransportError as e:
            raise transport_error(e, self.response.request) from e
        except httpx.DecodingError as e:
            raise StreamDecodeError(f"Could not decode event stream body: {e}") from e

    def close(self) -> None:
        self._frames.close()
        self.response.close()


class EventStream(EventStreamBase[T]):
    """
    Synchronous resumable event stream.

    Created by HorizonClient.stream(). The connection is opened lazily on the
    first ``next()``. ``AwaitingResponse`` is never observed here because the
    connection request blocks until the response headers arrive.

    Usage as a context manager is recommended:

        with client.stream(StreamEndpoint("/ledgers", Ledger)) as events:
            for ledger in events:
                process(ledger)
    """

    def __init__(
        self,
        client: HorizonClient,
        request: StreamRequest[T],
        *,
        last_event_id: str | None = None,
    ) -> None:
        super().__init__(request, last_event_id=last_event_id)
        self._client = client

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        while True:
            if self._closed:
                raise StopIteration

            state = self._state

            if isinstance(state, NeedConnection):
                response = self._client._open_stream(self._request, self._last_event_id)
                self._state = AwaitingEvent(_FrameReader(response))
                continue

            assert isinstance(state, AwaitingEvent)
            reader: _FrameReader = state.decoder
            try:
                frame = reader.next_frame()
            except (StreamDecodeError, TransportError) as e:
                logger.warning("Event stream connection failed: %s", e)
                self._drop_connection(reader)
                raise

            if frame is None:
                logger.debug(
                    "Event stream connection closed, reconnecting after %r",
                    self._last_event_id,
                )
                self._drop_connection(reader)
                continue

            item = self._handle_frame(frame)
            if item is not SKIP:
                return item  # type: ignore[return-value]

    def _drop_connection(self, reader: _FrameReader) -> None:
        self._state = NeedConnection()
        reader.close()

    def close(self) -> None:
        """Close the stream and release the open connection, if any."""
        if self._closed:
            return
        self._closed = True
        state = self._state
        self._state = NeedConnection()
        if isinstance(state, AwaitingEvent):
            state.decoder.close()

    def __enter__(self) -> EventStream[T]:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
