"""Tests for the request capabilities and generic endpoints."""

import httpx

from horizon_client.request import Endpoint, Request, StreamEndpoint, StreamRequest

HOST = httpx.URL("https://horizon.example.com")


class TestEndpoint:
    """Tests for Endpoint."""

    def test_uri(self) -> None:
        req = Endpoint("/accounts/GABC", dict)
        assert str(req.uri(HOST)) == "https://horizon.example.com/accounts/GABC"

    def test_uri_with_params(self) -> None:
        req = Endpoint("/ledgers", dict, params={"limit": 2, "order": "asc"})
        assert str(req.uri(HOST)) == "https://horizon.example.com/ledgers?limit=2&order=asc"

    def test_method(self) -> None:
        assert Endpoint("/", dict).is_post() is False
        assert Endpoint("/transactions", dict, post=True).is_post() is True

    def test_satisfies_request_protocol(self) -> None:
        assert isinstance(Endpoint("/", dict), Request)


class TestStreamEndpoint:
    """Tests for StreamEndpoint."""

    def test_uri(self) -> None:
        req = StreamEndpoint("/ledgers", dict)
        assert str(req.uri(HOST)) == "https://horizon.example.com/ledgers"

    def test_cursor_param(self) -> None:
        req = StreamEndpoint("/trades", dict, cursor="now")
        assert req.uri(HOST).params["cursor"] == "now"

    def test_satisfies_stream_request_protocol(self) -> None:
        assert isinstance(StreamEndpoint("/", dict), StreamRequest)
