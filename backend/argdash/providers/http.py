"""Shared GET helper and typed errors for every upstream provider."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Mapping, TypeVar

import httpx

from argdash.config import AppSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UpstreamFetchError(RuntimeError):
    """Raised when an upstream call cannot produce a usable payload."""

    kind = "error"

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class UpstreamHTTPError(UpstreamFetchError):
    kind = "http_error"


class UpstreamTimeoutError(UpstreamFetchError):
    kind = "timeout"


class UpstreamParseError(UpstreamFetchError):
    kind = "parse_error"


class UpstreamNetworkError(UpstreamFetchError):
    kind = "network_error"


class UpstreamNotConfiguredError(UpstreamFetchError):
    kind = "not_configured"


async def within_deadline(awaitable: Awaitable[T], timeout: float | None, *, url: str) -> T:
    """Await ``awaitable``, cancelling it after ``timeout`` seconds with :class:`UpstreamTimeoutError`."""

    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as exc:
        raise UpstreamTimeoutError(f"No response within {timeout:g}s", url=url) from exc


def build_headers(
    settings: AppSettings,
    *,
    api_key: str | None = None,
    bearer_token: str | None = None,
) -> dict[str, str]:
    """Standard headers sent on every upstream request."""

    headers = {
        "Accept": "application/json",
        "User-Agent": settings.user_agent,
    }
    if api_key:
        headers["x-api-key"] = api_key
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"
    return headers


def build_http_client(settings: AppSettings) -> httpx.AsyncClient:
    """Connection pool shared by the providers for the lifetime of the application."""

    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream_timeout_seconds),
        follow_redirects=True,
    )


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> Any:
    """Issue one GET and return the decoded JSON body."""

    query = {k: v for k, v in (params or {}).items() if v is not None}
    logger.debug("Fetching %s params=%s", url, query)
    try:
        response = await client.get(url, params=query or None, headers=headers)
    except httpx.TimeoutException as exc:
        raise UpstreamTimeoutError(f"Timed out calling {url}", url=url) from exc
    except httpx.HTTPError as exc:
        raise UpstreamNetworkError(f"Failed to reach {url}: {exc}", url=url) from exc

    if not response.is_success:
        raise UpstreamHTTPError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            url=url,
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamParseError(
            f"{url} returned invalid JSON payload: {exc}",
            url=url,
            status_code=response.status_code,
        ) from exc


__all__ = [
    "UpstreamFetchError",
    "UpstreamHTTPError",
    "UpstreamNetworkError",
    "UpstreamNotConfiguredError",
    "UpstreamParseError",
    "UpstreamTimeoutError",
    "build_headers",
    "build_http_client",
    "get_json",
    "within_deadline",
]
