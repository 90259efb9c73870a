"""Tests for utility functions."""

from importlib.metadata import PackageNotFoundError

import httpx
import pytest

from horizon_client import _util
from horizon_client._errors import InvalidHost
from horizon_client._util import (
    clean_params,
    join_url,
    package_version,
    resolve_headers,
    resolve_host,
)


class TestResolveHost:
    """Tests for resolve_host."""

    def test_accepts_https_url(self) -> None:
        url = resolve_host("https://horizon.example.com")
        assert url.host == "horizon.example.com"

    def test_accepts_httpx_url(self) -> None:
        original = httpx.URL("http://localhost:8000")
        assert resolve_host(original) is original

    @pytest.mark.parametrize("host", ["not a url", "/relative/path", "ftp://example.com"])
    def test_rejects_invalid_hosts(self, host: str) -> None:
        with pytest.raises(InvalidHost):
            resolve_host(host)

    def test_rejects_non_string(self) -> None:
        with pytest.raises(InvalidHost):
            resolve_host(42)  # type: ignore[arg-type]


class TestJoinUrl:
    """Tests for join_url."""

    def test_appends_path(self) -> None:
        url = join_url(httpx.URL("https://horizon.example.com"), "/ledgers/1")
        assert str(url) == "https://horizon.example.com/ledgers/1"

    def test_keeps_host_prefix(self) -> None:
        url = join_url(httpx.URL("https://example.com/horizon/"), "accounts")
        assert str(url) == "https://example.com/horizon/accounts"

    def test_adds_params(self) -> None:
        url = join_url(
            httpx.URL("https://horizon.example.com"),
            "/trades",
            {"limit": 10, "order": "desc", "cursor": None},
        )
        assert url.params["limit"] == "10"
        assert url.params["order"] == "desc"
        assert "cursor" not in url.params

    def test_merges_host_params(self) -> None:
        url = join_url(httpx.URL("https://horizon.example.com?network=test"), "/", {"a": "b"})
        assert url.params["network"] == "test"
        assert url.params["a"] == "b"


class TestCleanParams:
    """Tests for clean_params."""

    def test_none_is_empty(self) -> None:
        assert clean_params(None) == {}

    def test_converts_values(self) -> None:
        params = clean_params({"limit": 5, "include_failed": True, "join": False, "x": None})
        assert params == {"limit": "5", "include_failed": "true", "join": "false"}


class TestResolveHeaders:
    """Tests for resolve_headers."""

    def test_none_is_empty(self) -> None:
        assert resolve_headers(None) == {}

    def test_static_and_callable_values(self) -> None:
        calls = []

        def trace_id() -> str:
            calls.append(1)
            return f"trace-{len(calls)}"

        headers = {"X-Static": "value", "X-Trace": trace_id}
        assert resolve_headers(headers) == {"X-Static": "value", "X-Trace": "trace-1"}
        assert resolve_headers(headers)["X-Trace"] == "trace-2"


def test_package_version_is_a_string() -> None:
    assert isinstance(package_version(), str)
    assert package_version()


def test_package_version_when_not_installed(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(name: str) -> str:
        raise PackageNotFoundError(name)

    monkeypatch.setattr(_util, "version", missing)
    assert package_version() == "0+unknown"
