"""
Core types for the Horizon client.

This module defines the fundamental types and protocol constants used
throughout the library.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar, Union

import httpx
from pydantic import TypeAdapter

# Type parameter for decoded payloads
T = TypeVar("T")

# Target of a JSON decode: a model/type, or a prebuilt adapter
DecodeTarget = Union[type[T], TypeAdapter[T]]

# Type for headers - can be static strings or callables
HeadersLike = dict[str, str | Callable[[], str]]

# Type for query params - None values are omitted
ParamsLike = dict[str, Any]

# Type for timeouts - seconds, an httpx.Timeout, or None for no timeout
TimeoutLike = Union[float, httpx.Timeout, None]


class _Pending:
    """Sentinel returned by a poll that cannot make progress yet."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "PENDING"


PENDING = _Pending()


class _Unset:
    """Default for arguments where None is a meaningful value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True, slots=True)
class SSEMessage:
    """
    A complete SSE message frame.

    Attributes:
        event: The event name ("message" when the frame names none)
        data: The data lines joined with newlines
        id: The frame id, if the frame carried one
    """

    event: str
    data: str
    id: str | None = None


@dataclass(frozen=True, slots=True)
class SSERetry:
    """A reconnection-time hint, in milliseconds."""

    retry_ms: int


SSEFrame = SSEMessage | SSERetry


# Protocol constants
CLIENT_NAME_HEADER = "X-Client-Name"
CLIENT_VERSION_HEADER = "X-Client-Version"
LAST_EVENT_ID_HEADER = "Last-Event-Id"
ACCEPT_HEADER = "Accept"
EVENT_STREAM_CONTENT_TYPE = "text/event-stream"

DEFAULT_CLIENT_NAME = "horizon-client-py"
DEFAULT_EVENT_NAME = "message"
DEFAULT_TIMEOUT = 30.0
