"""
AsyncEventStream - pollable, resumable SSE event stream.

``poll()`` is a non-blocking advance: it inspects the in-flight connection
and body reads (asyncio tasks), decodes what is available and returns a
typed event, or PENDING when nothing can be produced yet. ``wait()`` suspends
until the current suspension point has progressed. ``async for`` combines the
two.

Connection errors and decode errors are raised from ``poll()`` one at a
time. The stream stays usable: the next poll reconnects with
``Last-Event-Id`` set to the last event seen.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import deque
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, TypeVar

import httpx

from horizon_client._base import transport_error
from horizon_client._errors import StreamDecodeError, TransportError
from horizon_client._sse import SSEDecoder
from horizon_client._state import (
    SKIP,
    AwaitingEvent,
    AwaitingResponse,
    EventStreamBase,
    NeedConnection,
)
from horizon_client._types import PENDING, SSEFrame, _Pending
from horizon_client.request import StreamRequest

if TYPE_CHECKING:
    from horizon_client.aclient import AsyncHorizonClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _AsyncFrameReader:
    """
    Pollable frame decoder over one open response.

    At most one body read is in flight at a time; decoded frames are
    buffered until polled.
    """

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self._chunks = response.aiter_bytes()
        self._decoder = SSEDecoder()
        self._frames: deque[SSEFrame] = deque()
        self._pending: asyncio.Task[bytes | None] | None = None
        self._exhausted = False

    @property
    def waiter(self) -> asyncio.Task[bytes | None] | None:
        """The in-flight body read, if any."""
        return self._pending

    def poll(self) -> SSEFrame | _Pending | None:
        """
        Return the next frame, PENDING, or None once the body has ended.

        Raises:
            StreamDecodeError: On malformed framing or body encoding
            TransportError: If reading the body fails
        """
        while True:
            if self._frames:
                return self._frames.popleft()
            if self._exhausted:
                return None

            if self._pending is None:
                self._pending = asyncio.ensure_future(self._next_chunk())
            if not self._pending.done():
                return PENDING

            pending, self._pending = self._pending, None
            chunk = pending.result()
            if chunk is None:
                self._exhausted = True
                self._frames.extend(self._decoder.finish())
            else:
                self._frames.extend(self._decoder.feed(chunk))

    async def _next_chunk(self) -> bytes | None:
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            return None
        except httpx.TransportError as e:
            raise transport_error(e, self.response.request) from e
        except httpx.DecodingError as e:
            raise StreamDecodeError(f"Could not decode event stream body: {e}") from e

    async def aclose(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None:
            await _discard_task(pending)
        self._frames.clear()
        await self.response.aclose()


async def _discard_task(task: asyncio.Task[object]) -> None:
    """Cancel a task and collect its outcome so nothing is left unretrieved."""
    if not task.done():
        task.cancel()
    with contextlib.suppress(asyncio.CancelledError, Exception):
        await task


class AsyncEventStream(EventStreamBase[T]):
    """
    Asynchronous, pollable resumable event stream.

    Created by AsyncHorizonClient.stream(). Nothing happens until the stream
    is polled or iterated. A stream instance must be driven by one consumer
    at a time.

    Usage as an async context manager is recommended:

        async with client.stream(StreamEndpoint("/ledgers", Ledger)) as events:
            async for ledger in events:
                process(ledger)
    """

    def __init__(
        self,
        client: AsyncHorizonClient,
        request: StreamRequest[T],
        *,
        last_event_id: str | None = None,
    ) -> None:
        super().__init__(request, last_event_id=last_event_id)
        self._client = client
        # Connections dropped from inside poll(), closed in the background
        self._closing: set[asyncio.Task[None]] = set()

    def poll(self) -> T | _Pending:
        """
        Advance the stream without blocking.

        Must be called from a running event loop.

        Returns:
            The next event, or PENDING if no event is available yet

        Raises:
            StopAsyncIteration: If the stream is closed
            InvalidHost, RequestBuildError: If the connection request cannot
                be built
            TransportError: If connecting or reading fails
            RequestError, ServerError: If the server refuses the connection
            StreamDecodeError: On malformed framing
            DeserializationError: If an event payload does not match the
                resource type
        """
        while True:
            if self._closed:
                raise StopAsyncIteration

            state = self._state

            if isinstance(state, NeedConnection):
                connect = self._client._open_stream(self._request, self._last_event_id)
                self._state = AwaitingResponse(asyncio.ensure_future(connect))
                continue

            if isinstance(state, AwaitingResponse):
                task: asyncio.Task[httpx.Response] = state.pending
                if not task.done():
                    return PENDING
                self._state = NeedConnection()
                response = task.result()
                self._state = AwaitingEvent(_AsyncFrameReader(response))
                continue

            reader: _AsyncFrameReader = state.decoder
            try:
                frame = reader.poll()
            except (StreamDecodeError, TransportError) as e:
                logger.warning("Event stream connection failed: %s", e)
                self._drop_connection(reader)
                raise

            if frame is PENDING:
                return PENDING

            if frame is None:
                logger.debug(
                    "Event stream connection closed, reconnecting after %r",
                    self._last_event_id,
                )
                self._drop_connection(reader)
                continue

            item = self._handle_frame(frame)  # type: ignore[arg-type]
            if item is not SKIP:
                return item  # type: ignore[return-value]

    async def wait(self) -> None:
        """Suspend until the current suspension point can make progress."""
        state = self._state
        waiter: asyncio.Future[object] | None = None
        if isinstance(state, AwaitingResponse):
            waiter = state.pending
        elif isinstance(state, AwaitingEvent):
            waiter = state.decoder.waiter

        if waiter is not None and not waiter.done():
            await asyncio.wait([waiter])

    def __aiter__(self) -> AsyncIterator[T]:
        return self

    async def __anext__(self) -> T:
        while True:
            item = self.poll()
            if item is not PENDING:
                return item  # type: ignore[return-value]
            await self.wait()

    def _drop_connection(self, reader: _AsyncFrameReader) -> None:
        self._state = NeedConnection()
        task = asyncio.ensure_future(reader.aclose())
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def aclose(self) -> None:
        """Close the stream, cancelling in-flight IO and releasing connections."""
        if self._closed:
            return
        self._closed = True
        state = self._state
        self._state = NeedConnection()

        if isinstance(state, AwaitingResponse):
            task: asyncio.Task[httpx.Response] = state.pending
            if task.done() and not task.cancelled() and task.exception() is None:
                await task.result().aclose()
            else:
                await _discard_task(task)
        elif isinstance(state, AwaitingEvent):
            await state.decoder.aclose()

        if self._closing:
            await asyncio.gather(*self._closing, return_exceptions=True)

    async def __aenter__(self) -> AsyncEventStream[T]:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
