"""
AsyncHorizonClient - asynchronous client for one-shot requests and event streams.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx

from horizon_client._base import (
    BaseHorizonClient,
    decode_response,
    needs_body,
    transport_error,
)
from horizon_client._errors import StatusClass, classify_status, error_from_status
from horizon_client._types import UNSET, HeadersLike, TimeoutLike, _Unset
from horizon_client.astream import AsyncEventStream
from horizon_client.request import Request, StreamRequest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncHorizonClient(BaseHorizonClient):
    """
    An asynchronous Horizon client.

    Async version of HorizonClient, backed by an httpx.AsyncClient.

    Example:
        >>> async with AsyncHorizonClient("https://horizon.example.com") as client:
        ...     ledger = await client.request(Endpoint("/ledgers/1", Ledger))
        ...     async for trade in client.stream(StreamEndpoint("/trades", Trade)):
        ...         print(trade)
    """

    def __init__(
        self,
        host: str | httpx.URL,
        *,
        client_name: str | None = None,
        client_version: str | None = None,
        headers: HeadersLike | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: TimeoutLike | _Unset = UNSET,
    ) -> None:
        """
        Create an async client for the server at ``host``.

        No network IO is performed by the constructor.

        Args:
            host: Base URL of the server
            client_name: Sent as X-Client-Name on every request
            client_version: Sent as X-Client-Version on every request
            headers: Extra HTTP headers (static strings or callables)
            client: Optional httpx.AsyncClient to use (will not be closed)
            timeout: Request timeout in seconds or an httpx.Timeout (default
                30s, None disables it); streams only apply it to connecting

        Raises:
            InvalidHost: If ``host`` is not an absolute http(s) URL
        """
        super().__init__(
            host,
            client_name=client_name,
            client_version=client_version,
            headers=headers,
            timeout=timeout,
        )
        self._own_client = client is None
        self._http = client or httpx.AsyncClient(timeout=self._timeout)

    async def aclose(self) -> None:
        """Close the client and release resources."""
        if self._own_client:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncHorizonClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def request(self, req: Request[T]) -> T:
        """
        Send a one-shot request and decode the response.

        Args:
            req: The request to send

        Returns:
            The success body decoded as ``req.response_type``

        Raises:
            InvalidHost: If the endpoint cannot be resolved
            RequestBuildError: If the HTTP request cannot be constructed
            TransportError: On network failure or an undecodable body encoding
            RequestError: On a 4xx response
            ServerError: On any other non-success response
            DeserializationError: If a body does not match its schema
        """
        http_request = self._build_request(self._http, req)
        url = str(http_request.url)
        logger.debug("%s %s", http_request.method, url)

        try:
            response = await self._http.send(http_request, stream=True)
        except httpx.TransportError as e:
            raise transport_error(e, http_request) from e

        try:
            body = await response.aread() if needs_body(response.status_code) else b""
        except (httpx.TransportError, httpx.DecodingError) as e:
            raise transport_error(e, http_request) from e
        finally:
            await response.aclose()

        return decode_response(response.status_code, body, url, req.response_type)

    def stream(
        self,
        req: StreamRequest[T],
        *,
        last_event_id: str | None = None,
    ) -> AsyncEventStream[T]:
        """
        Create a resumable event stream.

        No network IO is performed until the stream is polled or iterated.

        Args:
            req: The stream request
            last_event_id: Resume after this event id (e.g. a persisted cursor)

        Returns:
            AsyncEventStream yielding ``req.resource_type`` values
        """
        return AsyncEventStream(self, req, last_event_id=last_event_id)

    async def _open_stream(
        self, req: StreamRequest[Any], last_event_id: str | None
    ) -> httpx.Response:
        """Open one SSE connection; the response is returned unread."""
        http_request = self._build_stream_request(self._http, req, last_event_id)
        url = str(http_request.url)
        logger.debug("Connecting event stream %s (Last-Event-Id=%r)", url, last_event_id)

        try:
            response = await self._http.send(http_request, stream=True)
        except httpx.TransportError as e:
            logger.warning("Event stream connection to %s failed: %s", url, e)
            raise transport_error(e, http_request) from e

        status = response.status_code
        if classify_status(status) is StatusClass.SUCCESS:
            return response

        try:
            body = await response.aread() if needs_body(status) else None
        except (httpx.TransportError, httpx.DecodingError) as e:
            raise transport_error(e, http_request) from e
        finally:
            await response.aclose()
        raise error_from_status(status, url, body=body)
