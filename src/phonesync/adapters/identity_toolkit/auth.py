"""Bearer authentication backed by refreshable Google credentials."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request

from phonesync.domain.errors import IdentityStoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Generator

    from google.auth.credentials import Credentials

log = getLogger(__name__)


class GoogleCredentialsAuth(httpx.Auth):
    """Attach the current access token and refresh it once it has expired.

    google-auth refreshes through a blocking transport, so the async flow runs
    the refresh in a worker thread. Concurrent requests share one refresh. A
    ``401`` answer forces a refresh and a single resend.
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        request_factory: Callable[[], Request] = Request,
    ) -> None:
        self._credentials = credentials
        self._request_factory = request_factory
        self._lock = asyncio.Lock()

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        if not self._credentials.valid:
            self._refresh()
        response = yield self._authorize(request)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self._refresh()
            yield self._authorize(request)

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        if not self._credentials.valid:
            await self._refresh_shared(stale_token=self._credentials.token)
        sent_token = self._credentials.token
        response = yield self._authorize(request)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            await self._refresh_shared(stale_token=sent_token)
            yield self._authorize(request)

    async def _refresh_shared(self, *, stale_token: str | None) -> None:
        async with self._lock:
            # another request may have refreshed while this one waited
            if self._credentials.valid and self._credentials.token != stale_token:
                return
            await asyncio.to_thread(self._refresh)

    def _refresh(self) -> None:
        log.debug("Refreshing identity store access token")
        try:
            self._credentials.refresh(self._request_factory())
        except RefreshError as exc:
            raise IdentityStoreError(
                f"Could not refresh identity store credentials: {exc}",
                code="credentials-refresh-failed",
            ) from exc

    def _authorize(self, request: httpx.Request) -> httpx.Request:
        request.headers["Authorization"] = f"Bearer {self._credentials.token}"
        return request


__all__ = ["GoogleCredentialsAuth"]
