"""Callable operations exposed to remote clients.

These functions take the raw request payload plus the transport's view of the
caller and return plain JSON-compatible dictionaries. Failures are raised as
:class:`~phonesync.domain.errors.ServiceError` subclasses whose ``code`` is the
wire error code.
"""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from phonesync.domain.backfill import DEFAULT_CONCURRENCY, BackfillRequest, run_backfill
from phonesync.domain.backfill.reconcile import DEFAULT_CALL_TIMEOUT_SECONDS
from phonesync.domain.errors import (
    InternalError,
    InvalidArgumentError,
    PermissionDeniedError,
    ServiceError,
    UnauthenticatedError,
)
from phonesync.domain.lookup import resolve_email_by_phone
from phonesync.domain.model import ADMIN_ROLE

if TYPE_CHECKING:
    from phonesync.domain.ports import DirectoryStore, IdentityStore, RoleResolver

log = getLogger(__name__)


class CallablePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class ResolveEmailPayload(CallablePayload):
    phone: str = ""


class BackfillPayload(CallablePayload):
    domain: str = ""
    password: str | None = None
    limit: int | None = None
    dry_run: bool = Field(default=False, alias="dryRun")
    community_code: str | None = Field(default=None, alias="communityCode")

    def to_request(self) -> BackfillRequest:
        return BackfillRequest(
            domain=self.domain,
            password=self.password or None,
            limit=self.limit,
            dry_run=self.dry_run,
            community_scope=self.community_code or None,
        )


def _parse[TPayload: CallablePayload](
    model: type[TPayload], data: Mapping[str, object] | None
) -> TPayload:
    try:
        return model.model_validate(dict(data or {}))
    except ValidationError as exc:
        message = f"Invalid request payload: {exc.error_count()} error(s)"
        raise InvalidArgumentError(message) from exc


async def resolve_email_by_phone_callable(
    data: Mapping[str, object] | None,
    *,
    directory: DirectoryStore,
) -> dict[str, str]:
    payload = _parse(ResolveEmailPayload, data)
    try:
        result = await resolve_email_by_phone(directory, payload.phone)
    except ServiceError:
        raise
    except Exception as exc:
        log.exception("Phone lookup failed")
        raise InternalError(str(exc) or "lookup failed") from exc
    return {"email": result.email, "id": result.id}


async def require_admin(caller_id: str | None, roles: RoleResolver) -> None:
    if not caller_id:
        raise UnauthenticatedError("Sign in required")
    try:
        role = await roles.resolve_role(caller_id)
    except Exception as exc:
        log.warning("Role lookup failed for caller %s: %s", caller_id, exc)
        raise PermissionDeniedError("Role check failed or caller is not an admin") from exc
    if role != ADMIN_ROLE:
        raise PermissionDeniedError("Only admins may run this operation")


async def backfill_emails_and_auth_callable(
    data: Mapping[str, object] | None,
    *,
    caller_id: str | None,
    directory: DirectoryStore,
    identity: IdentityStore,
    roles: RoleResolver,
    concurrency: int = DEFAULT_CONCURRENCY,
    call_timeout: float | None = DEFAULT_CALL_TIMEOUT_SECONDS,
) -> dict[str, object]:
    await require_admin(caller_id, roles)
    payload = _parse(BackfillPayload, data)
    if not payload.domain:
        raise InvalidArgumentError("Missing domain")

    try:
        result = await run_backfill(
            payload.to_request(),
            directory=directory,
            identity=identity,
            concurrency=concurrency,
            call_timeout=call_timeout,
        )
    except ServiceError:
        raise
    except Exception as exc:
        log.exception("Backfill run failed")
        raise InternalError(str(exc) or "backfill failed") from exc
    return result.to_payload()


__all__ = [
    "BackfillPayload",
    "ResolveEmailPayload",
    "backfill_emails_and_auth_callable",
    "require_admin",
    "resolve_email_by_phone_callable",
]
