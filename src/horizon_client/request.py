"""
Request capabilities consumed by the clients.

Endpoint catalogues implement ``Request`` (one-shot calls) and
``StreamRequest`` (event streams). ``Endpoint`` and ``StreamEndpoint`` are
generic implementations built from a path, query params and a model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

import httpx

from horizon_client._types import DecodeTarget, ParamsLike
from horizon_client._util import join_url

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Request(Protocol[T_co]):
    """A one-shot request whose success body decodes as ``response_type``."""

    @property
    def response_type(self) -> DecodeTarget[Any]: ...

    def uri(self, host: httpx.URL) -> httpx.URL:
        """Return the target URL relative to ``host``."""
        ...

    def is_post(self) -> bool: ...


@runtime_checkable
class StreamRequest(Protocol[T_co]):
    """A stream request whose ``message`` events decode as ``resource_type``."""

    @property
    def resource_type(self) -> DecodeTarget[Any]: ...

    def uri(self, host: httpx.URL) -> httpx.URL:
        """Return the target URL relative to ``host``."""
        ...


@dataclass(frozen=True, slots=True)
class Endpoint(Generic[T]):
    """
    A one-shot request to ``path`` on the host.

    Example:
        >>> req = Endpoint("/ledgers/1", Ledger)
        >>> ledger = client.request(req)
    """

    path: str
    response_type: DecodeTarget[T]
    params: ParamsLike = field(default_factory=dict)
    post: bool = False

    def uri(self, host: httpx.URL) -> httpx.URL:
        return join_url(host, self.path, self.params)

    def is_post(self) -> bool:
        return self.post


@dataclass(frozen=True, slots=True)
class StreamEndpoint(Generic[T]):
    """
    A streaming request to ``path`` on the host.

    ``cursor`` is sent as a query parameter on every connection. The
    ``Last-Event-Id`` header takes over once an event has been received.
    """

    path: str
    resource_type: DecodeTarget[T]
    params: ParamsLike = field(default_factory=dict)
    cursor: str | None = None

    def uri(self, host: httpx.URL) -> httpx.URL:
        params = dict(self.params)
        if self.cursor is not None:
            params["cursor"] = self.cursor
        return join_url(host, self.path, params)
