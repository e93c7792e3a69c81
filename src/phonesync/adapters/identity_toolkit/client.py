"""Identity-account store backed by the Identity Toolkit REST API."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from phonesync.adapters.http_resilience import ResilientClient
from phonesync.domain.errors import IdentityStoreError

from .auth import GoogleCredentialsAuth
from .schema import (
    AccountResponse,
    CreateAccountRequest,
    IdentityToolkitModel,
    LookupAccountsRequest,
    LookupAccountsResponse,
    UpdateAccountRequest,
)
from .translator import translate_account, translate_error

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from phonesync.config.http_resilience import ResilienceConfig
    from phonesync.config.identity import IdentityStoreConfig
    from phonesync.domain.model import IdentityAccount

log = getLogger(__name__)


class IdentityToolkitStore:
    """Admin account operations scoped to one project.

    Use as an async context manager; the underlying HTTP client (and its rate
    limiter) lives for the duration of the ``async with`` block.
    """

    def __init__(
        self,
        *,
        config: IdentityStoreConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> IdentityToolkitStore:
        resilience = self._config.resilience
        if self._config.credentials is not None:
            resilience = replace(resilience, auth=GoogleCredentialsAuth(self._config.credentials))
        self._client = self._client_factory(resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_account(self, account_id: str) -> IdentityAccount | None:
        response = await self._post(
            "accounts:lookup",
            LookupAccountsRequest(local_ids=[account_id]),
            account_id=account_id,
        )
        payload = self._parse(LookupAccountsResponse, response)
        for user in payload.users:
            if user.local_id == account_id:
                return translate_account(user)
        return None

    async def create_account(
        self,
        account_id: str,
        *,
        email: str,
        password: str,
        phone_number: str,
    ) -> IdentityAccount:
        response = await self._post(
            "accounts",
            CreateAccountRequest(
                local_id=account_id,
                email=email,
                password=password,
                phone_number=phone_number,
            ),
            account_id=account_id,
        )
        log.debug("Created identity account %s", account_id)
        return translate_account(self._parse(AccountResponse, response))

    async def update_account(
        self,
        account_id: str,
        *,
        email: str | None = None,
        password: str | None = None,
        phone_number: str | None = None,
    ) -> IdentityAccount:
        response = await self._post(
            "accounts:update",
            UpdateAccountRequest(
                local_id=account_id,
                email=email,
                password=password,
                phone_number=phone_number,
            ),
            account_id=account_id,
        )
        log.debug("Updated identity account %s", account_id)
        return translate_account(self._parse(AccountResponse, response))

    async def _post(
        self,
        operation: str,
        body: IdentityToolkitModel,
        *,
        account_id: str,
    ) -> httpx.Response:
        client = self._require_client()
        path = f"projects/{self._config.project_id}/{operation}"
        try:
            response = await client.post(path, json=body.to_body())
        except httpx.HTTPError as exc:
            name = type(exc).__name__
            raise IdentityStoreError(str(exc) or name, code=name) from exc
        if response.is_error:
            raise translate_error(response, account_id=account_id)
        return response

    def _parse[TModel: IdentityToolkitModel](
        self, model: type[TModel], response: httpx.Response
    ) -> TModel:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise IdentityStoreError(
                "Unexpected identity store response payload", code="invalid-response"
            ) from exc

    def _require_client(self) -> ResilientClient:
        if self._client is None:
            raise IdentityStoreError(
                "Identity store client not opened; use 'async with IdentityToolkitStore(...)'",
                code="client-closed",
            )
        return self._client
