"""
Connection states and frame handling shared by EventStream and AsyncEventStream.

A stream is always in exactly one state:

- ``NeedConnection``: no connection; the next advance opens one
- ``AwaitingResponse``: a connection request is in flight
- ``AwaitingEvent``: the response body is being decoded into frames

The pending response is consumed exactly once to produce a decoder, so a
stream never holds both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from horizon_client._parse import decode_json
from horizon_client._types import DEFAULT_EVENT_NAME, SSEFrame, SSERetry
from horizon_client.request import StreamRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P")
D = TypeVar("D")


@dataclass(frozen=True, slots=True)
class NeedConnection:
    """No open connection."""


@dataclass(frozen=True, slots=True)
class AwaitingResponse(Generic[P]):
    """A connection request is in flight."""

    pending: P


@dataclass(frozen=True, slots=True)
class AwaitingEvent(Generic[D]):
    """A response body is being decoded."""

    decoder: D


StreamState = Union[NeedConnection, AwaitingResponse[Any], AwaitingEvent[Any]]


class _Skip:
    __slots__ = ()


SKIP = _Skip()


class EventStreamBase(Generic[T]):
    """
    Cursor bookkeeping and frame handling for a resumable event stream.

    Subclasses drive the state transitions with blocking or pollable IO.
    """

    def __init__(
        self,
        request: StreamRequest[T],
        *,
        last_event_id: str | None = None,
    ) -> None:
        self._request = request
        self._last_event_id = last_event_id
        self._retry_ms: int | None = None
        self._state: StreamState = NeedConnection()
        self._closed = False

    @property
    def request(self) -> StreamRequest[T]:
        """The stream request this stream was created for."""
        return self._request

    @property
    def last_event_id(self) -> str | None:
        """Id of the last event seen; sent as Last-Event-Id on reconnect."""
        return self._last_event_id

    @property
    def retry(self) -> int | None:
        """Most recent reconnection hint from the server, in milliseconds."""
        return self._retry_ms

    @property
    def state(self) -> StreamState:
        """Current connection state."""
        return self._state

    @property
    def closed(self) -> bool:
        """Whether the stream is closed."""
        return self._closed

    def _handle_frame(self, frame: SSEFrame) -> T | _Skip:
        """
        Apply one decoded frame.

        Returns the decoded item for ``message`` frames and SKIP for anything
        the consumer does not see.

        Raises:
            DeserializationError: If a message payload does not match the
                resource type (the cursor has already moved past it)
        """
        if isinstance(frame, SSERetry):
            self._retry_ms = frame.retry_ms
            logger.debug("Server suggested a %dms reconnection delay", frame.retry_ms)
            return SKIP

        if frame.id is not None:
            self._last_event_id = frame.id

        if frame.event != DEFAULT_EVENT_NAME:
            return SKIP

        return decode_json(frame.data, self._request.resource_type)
