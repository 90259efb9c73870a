"""
Pytest configuration and fixtures for horizon-client tests.

Clients are wired to an httpx.MockTransport backed by a ScriptedServer, which
answers requests from a queue and records every request it sees.
"""

from collections import deque
from collections.abc import AsyncGenerator, Callable, Generator
from typing import Any

import httpx
import pytest

from horizon_client import AsyncHorizonClient, HorizonClient

HOST = "https://horizon.example.com"


class ScriptedServer:
    """Serves queued responses in order and records requests."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._script: deque[Any] = deque()

    def push(self, *responses: httpx.Response | Exception | Callable[..., Any]) -> None:
        """
        Queue responses for the next requests.

        Entries may be a Response, an exception to raise from the transport,
        or a callable taking the request (sync or async) that returns a
        Response.
        """
        self._script.extend(responses)

    @property
    def pending(self) -> int:
        return len(self._script)

    def handler(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        if not self._script:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        entry = self._script.popleft()
        if isinstance(entry, Exception):
            raise entry
        if callable(entry):
            return entry(request)
        return entry


@pytest.fixture
def anyio_backend() -> str:
    # The pollable stream schedules asyncio tasks
    return "asyncio"


@pytest.fixture
def server() -> ScriptedServer:
    return ScriptedServer()


@pytest.fixture
def client(server: ScriptedServer) -> Generator[HorizonClient, None, None]:
    """A HorizonClient talking to the scripted server."""
    http = httpx.Client(transport=httpx.MockTransport(server.handler))
    with HorizonClient(
        HOST,
        client_name="test-client",
        client_version="1.2.3",
        client=http,
    ) as horizon:
        yield horizon
    http.close()


@pytest.fixture
async def aclient(server: ScriptedServer) -> AsyncGenerator[AsyncHorizonClient, None]:
    """An AsyncHorizonClient talking to the scripted server."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
    async with AsyncHorizonClient(
        HOST,
        client_name="test-client",
        client_version="1.2.3",
        client=http,
    ) as horizon:
        yield horizon
    await http.aclose()
