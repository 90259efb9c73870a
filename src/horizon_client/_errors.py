"""
Exception hierarchy for the Horizon client.

This module defines all exceptions that can be raised by the library, and the
status classification shared by one-shot requests and stream connections.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from horizon_client.resources import HorizonError


class HorizonClientError(Exception):
    """
    Base exception for all Horizon client errors.

    Attributes:
        message: Human-readable error message
        status: HTTP status code (if applicable)
        code: Error code for programmatic handling
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details

    def __str__(self) -> str:
        parts = [self.message]
        if self.status is not None:
            parts.append(f"(status={self.status})")
        if self.code is not None:
            parts.append(f"[{self.code}]")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"status={self.status!r}, "
            f"code={self.code!r})"
        )


class InvalidHost(HorizonClientError):
    """Raised when the host, or a URL derived from it, cannot be resolved."""

    def __init__(self, message: str = "Invalid host", host: Any = None) -> None:
        if host is not None:
            message = f"Invalid host: {host!r}"
        super().__init__(message, code="INVALID_HOST")
        self.host = host


class RequestBuildError(HorizonClientError):
    """Raised when the outgoing HTTP request cannot be constructed."""

    def __init__(self, message: str = "Could not build request") -> None:
        super().__init__(message, code="REQUEST_BUILD")


class TransportError(HorizonClientError):
    """
    Exception for network/connection failures.

    The underlying httpx exception is available as ``__cause__``. Streams
    recover from these by reconnecting on the next poll.

    Attributes:
        url: The URL that was being fetched
    """

    def __init__(self, message: str = "Transport error", url: str | None = None) -> None:
        super().__init__(message, code="TRANSPORT")
        self.url = url

    def __str__(self) -> str:
        text = super().__str__()
        if self.url:
            text = f"{text} at {self.url}"
        return text


class ServerError(HorizonClientError):
    """
    Exception raised for unexpected statuses (5xx and anything not 2xx/4xx).

    The response body is not decoded.
    """

    def __init__(
        self,
        message: str | None = None,
        status: int | None = None,
        url: str | None = None,
    ) -> None:
        if message is None:
            message = f"Server error at {url}" if url else "Server error"
        super().__init__(message, status=status, code="SERVER_ERROR")
        self.url = url


class RequestError(HorizonClientError):
    """
    Exception raised for a 4xx response carrying a structured error body.

    Attributes:
        payload: The decoded HorizonError returned by the server
    """

    def __init__(self, payload: HorizonError) -> None:
        super().__init__(
            payload.title or "Request error",
            status=payload.status,
            code="REQUEST_ERROR",
            details=payload.detail,
        )
        self.payload = payload


class DeserializationError(HorizonClientError):
    """
    Exception raised when a payload does not match the expected schema.

    Attributes:
        target: Name of the type that was being decoded
        body: The raw payload (truncated preview)
    """

    def __init__(
        self,
        message: str = "Failed to decode payload",
        target: str | None = None,
        body: str | bytes | None = None,
    ) -> None:
        super().__init__(message, code="DESERIALIZATION")
        self.target = target
        self.body = body


class StreamDecodeError(HorizonClientError):
    """Exception raised when an event stream body is not valid SSE framing."""

    def __init__(self, message: str = "Malformed event stream") -> None:
        super().__init__(message, code="SSE_DECODE")


class StatusClass(Enum):
    """Outcome class of an HTTP status code."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"


def classify_status(status: int) -> StatusClass:
    """
    Map an HTTP status code to its outcome class.

    2xx is a success, 4xx a client error whose body is the error schema, and
    everything else (5xx, 1xx, 3xx, out of range) a server error.
    """
    if 200 <= status < 300:
        return StatusClass.SUCCESS
    if 400 <= status < 500:
        return StatusClass.CLIENT_ERROR
    return StatusClass.SERVER_ERROR


def error_from_status(
    status: int,
    url: str,
    body: bytes | None = None,
) -> HorizonClientError:
    """
    Create an appropriate error from a non-success HTTP response.

    Args:
        status: The HTTP status code
        url: The URL that was requested
        body: The full response body (only decoded for 4xx)

    Returns:
        RequestError for 4xx with a valid error body, ServerError otherwise

    Raises:
        DeserializationError: If a 4xx body does not match the error schema
    """
    if classify_status(status) is StatusClass.CLIENT_ERROR:
        # _parse imports this module
        from horizon_client._parse import decode_error_payload

        return RequestError(decode_error_payload(body or b""))

    return ServerError(status=status, url=url)
