"""
State and helpers shared by HorizonClient and AsyncHorizonClient.

No network IO happens here: this module builds outgoing requests and turns
complete responses into decoded values or errors.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from horizon_client._errors import (
    InvalidHost,
    RequestBuildError,
    StatusClass,
    TransportError,
    classify_status,
    error_from_status,
)
from horizon_client._parse import decode_json
from horizon_client._types import (
    ACCEPT_HEADER,
    CLIENT_NAME_HEADER,
    CLIENT_VERSION_HEADER,
    DEFAULT_CLIENT_NAME,
    DEFAULT_TIMEOUT,
    EVENT_STREAM_CONTENT_TYPE,
    LAST_EVENT_ID_HEADER,
    UNSET,
    DecodeTarget,
    HeadersLike,
    T,
    TimeoutLike,
    _Unset,
)
from horizon_client._util import package_version, resolve_headers, resolve_host
from horizon_client.request import Request, StreamRequest

logger = logging.getLogger(__name__)


class BaseHorizonClient:
    """
    Configuration shared by every request and stream issued by a client.

    The host and identification pair are fixed at construction.
    """

    def __init__(
        self,
        host: str | httpx.URL,
        *,
        client_name: str | None = None,
        client_version: str | None = None,
        headers: HeadersLike | None = None,
        timeout: TimeoutLike | _Unset = UNSET,
    ) -> None:
        self._host = resolve_host(host)
        self._client_name = client_name or DEFAULT_CLIENT_NAME
        self._client_version = client_version or package_version()
        self._headers = headers
        # None disables timeouts
        self._timeout: TimeoutLike = (
            DEFAULT_TIMEOUT if isinstance(timeout, _Unset) else timeout
        )

    @property
    def host(self) -> httpx.URL:
        """The base URL all endpoints are resolved against."""
        return self._host

    @property
    def client_name(self) -> str:
        return self._client_name

    @property
    def client_version(self) -> str:
        return self._client_version

    def _default_headers(self) -> dict[str, str]:
        headers = resolve_headers(self._headers)
        headers[CLIENT_NAME_HEADER] = self._client_name
        headers[CLIENT_VERSION_HEADER] = self._client_version
        return headers

    def _resolve_uri(self, req: Request[Any] | StreamRequest[Any]) -> httpx.URL:
        try:
            return req.uri(self._host)
        except InvalidHost:
            raise
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise InvalidHost(f"Cannot resolve endpoint against {self._host}") from e

    def _build(
        self,
        http: httpx.Client | httpx.AsyncClient,
        method: str,
        url: httpx.URL,
        headers: dict[str, str],
        timeout: TimeoutLike,
    ) -> httpx.Request:
        try:
            return http.build_request(method, url, headers=headers, timeout=timeout)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise RequestBuildError(f"Could not build {method} request for {url}: {e}") from e

    def _build_request(
        self,
        http: httpx.Client | httpx.AsyncClient,
        req: Request[Any],
    ) -> httpx.Request:
        """Build the one-shot request for ``req``; the body is always empty."""
        method = "POST" if req.is_post() else "GET"
        url = self._resolve_uri(req)
        return self._build(http, method, url, self._default_headers(), self._timeout)

    def _build_stream_request(
        self,
        http: httpx.Client | httpx.AsyncClient,
        req: StreamRequest[Any],
        last_event_id: str | None,
    ) -> httpx.Request:
        """Build one SSE connection request, resuming after ``last_event_id``."""
        url = self._resolve_uri(req)
        headers = self._default_headers()
        headers[ACCEPT_HEADER] = EVENT_STREAM_CONTENT_TYPE
        if last_event_id is not None:
            headers[LAST_EVENT_ID_HEADER] = last_event_id

        return self._build(http, "GET", url, headers, self._stream_timeout())

    def _stream_timeout(self) -> httpx.Timeout:
        # SSE connections stay open indefinitely between events
        if isinstance(self._timeout, httpx.Timeout):
            return httpx.Timeout(
                connect=self._timeout.connect,
                read=None,
                write=self._timeout.write,
                pool=self._timeout.pool,
            )
        return httpx.Timeout(self._timeout, read=None)


def transport_error(e: httpx.HTTPError, request: httpx.Request) -> TransportError:
    """
    Wrap an httpx failure while sending or reading; callers raise it ``from e``.

    Covers transport errors and bodies that fail Content-Encoding decoding.
    """
    message = str(e) or type(e).__name__
    return TransportError(message, url=str(request.url))


def needs_body(status: int) -> bool:
    """Whether a response body must be read to produce an outcome."""
    return classify_status(status) is not StatusClass.SERVER_ERROR


def decode_response(
    status: int,
    body: bytes,
    url: str,
    target: DecodeTarget[T],
) -> T:
    """
    Turn a complete response into the declared value or an error.

    Args:
        status: The HTTP status code
        body: The full body (ignored unless 2xx or 4xx)
        url: The requested URL, for error messages
        target: The declared success type

    Raises:
        RequestError: For 4xx with a valid error body
        ServerError: For any other non-success status
        DeserializationError: If the body does not match the expected schema
    """
    if classify_status(status) is StatusClass.SUCCESS:
        return decode_json(body, target)

    error = error_from_status(status, url, body=body)
    logger.debug("Request to %s failed: %s", url, error)
    raise error
