"""
Shared utility functions for the Horizon client.

This module provides common utilities used by both sync and async implementations.
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

import httpx

from horizon_client._errors import InvalidHost
from horizon_client._types import HeadersLike, ParamsLike

DISTRIBUTION_NAME = "horizon-client"


def package_version() -> str:
    """Return the installed version, or a placeholder when not installed."""
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0+unknown"


def resolve_host(host: str | httpx.URL) -> httpx.URL:
    """
    Parse and validate the base host URL.

    Args:
        host: Absolute http(s) URL of the server

    Returns:
        The parsed URL

    Raises:
        InvalidHost: If the value is not an absolute http(s) URL
    """
    try:
        url = host if isinstance(host, httpx.URL) else httpx.URL(host)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidHost(host=host) from e

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidHost(host=host)
    return url


def resolve_headers(headers: HeadersLike | None) -> dict[str, str]:
    """
    Resolve headers from HeadersLike to a plain dict.

    Supports static string values or callable functions that return strings.

    Args:
        headers: Headers dict with static or callable values

    Returns:
        Resolved headers dict with all string values
    """
    if headers is None:
        return {}

    resolved: dict[str, str] = {}
    for key, value in headers.items():
        if callable(value):
            resolved[key] = value()
        else:
            resolved[key] = value
    return resolved


def clean_params(params: ParamsLike | None) -> dict[str, str]:
    """
    Convert query params to strings, omitting None values.

    Booleans are rendered lowercase to match the server's query syntax.
    """
    if params is None:
        return {}

    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


def join_url(host: httpx.URL, path: str, params: ParamsLike | None = None) -> httpx.URL:
    """
    Build an endpoint URL relative to the host.

    The path is appended to the host's own path, so a host mounted under a
    prefix (``https://example.com/horizon``) keeps that prefix.

    Args:
        host: The base host URL
        path: Endpoint path, e.g. "/accounts/GABC"
        params: Query parameters to add

    Raises:
        InvalidHost: If the joined URL is not valid
    """
    base_path = host.path.rstrip("/")
    full_path = f"{base_path}/{path.lstrip('/')}"
    merged: dict[str, Any] = dict(host.params)
    merged.update(clean_params(params))
    try:
        return host.copy_with(path=full_path, params=merged, fragment=None)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidHost(f"Cannot build URL for {path!r} on {host}") from e
