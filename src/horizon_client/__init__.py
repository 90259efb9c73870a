"""
Horizon Python Client

A Python client for a Horizon JSON-over-HTTP API and its resumable
Server-Sent Events streams.

This package provides both synchronous and asynchronous APIs.

Example usage:
    >>> from horizon_client import HorizonClient, Endpoint, StreamEndpoint
    >>>
    >>> with HorizonClient("https://horizon.example.com") as client:
    ...     # One-shot request
    ...     root = client.request(Endpoint("/", Root))
    ...
    ...     # Resumable stream, reconnects with Last-Event-Id
    ...     for ledger in client.stream(StreamEndpoint("/ledgers", Ledger)):
    ...         print(ledger)
"""

from horizon_client._errors import (
    DeserializationError,
    HorizonClientError,
    InvalidHost,
    RequestBuildError,
    RequestError,
    ServerError,
    StatusClass,
    StreamDecodeError,
    TransportError,
    classify_status,
)
from horizon_client._types import PENDING, HeadersLike, ParamsLike
from horizon_client._util import package_version
from horizon_client.aclient import AsyncHorizonClient
from horizon_client.astream import AsyncEventStream
from horizon_client.client import HorizonClient
from horizon_client.request import Endpoint, Request, StreamEndpoint, StreamRequest
from horizon_client.resources import HorizonError
from horizon_client.stream import EventStream

__all__ = [
    # Types
    "PENDING",
    "HeadersLike",
    "ParamsLike",
    "Request",
    "StreamRequest",
    "Endpoint",
    "StreamEndpoint",
    "HorizonError",
    # Errors
    "HorizonClientError",
    "InvalidHost",
    "RequestBuildError",
    "TransportError",
    "ServerError",
    "RequestError",
    "DeserializationError",
    "StreamDecodeError",
    "StatusClass",
    "classify_status",
    # Clients
    "HorizonClient",
    "AsyncHorizonClient",
    # Streams
    "EventStream",
    "AsyncEventStream",
]

__version__ = package_version()
