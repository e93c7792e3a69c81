from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypedDict

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import RetryTransport

from phonesync.config.http_resilience import (
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: float
    auth: httpx.Auth
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """``httpx.AsyncClient`` with retries, optional auth and a client-side rate limit."""

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=config.retry.build()),
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.auth is not None:
            client_kwargs["auth"] = config.auth

        self._client = httpx.AsyncClient(**client_kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(self, url: str, *, json: object) -> httpx.Response:
        async def do_request() -> httpx.Response:
            return await self._client.post(url, json=json)

        return await self._send(do_request)

    async def _send(self, func: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        if self._limiter is None:
            return await func()
        async with self._limiter:
            return await func()


__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
]
