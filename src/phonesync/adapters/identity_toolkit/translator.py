"""Translate Identity Toolkit payloads into domain types and errors."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from phonesync.domain.errors import (
    AccountConflictError,
    AccountNotFoundError,
    ConflictKey,
    IdentityStoreError,
)
from phonesync.domain.model import IdentityAccount

from .schema import ErrorResponse

if TYPE_CHECKING:
    import httpx

    from .schema import AccountResponse, UserInfo

log = getLogger(__name__)

CONFLICT_KEYS_BY_CODE: Final[dict[str, ConflictKey]] = {
    "EMAIL_EXISTS": ConflictKey.EMAIL,
    "PHONE_NUMBER_EXISTS": ConflictKey.PHONE,
    "DUPLICATE_LOCAL_ID": ConflictKey.ID,
}
NOT_FOUND_CODES: Final[frozenset[str]] = frozenset({"USER_NOT_FOUND"})


def error_code(message: str) -> str:
    """Return the leading code of messages such as ``INVALID_PHONE_NUMBER : TOO_SHORT``."""

    return message.split(":", 1)[0].strip()


def translate_error(response: httpx.Response, *, account_id: str) -> IdentityStoreError:
    try:
        payload = ErrorResponse.model_validate_json(response.content)
    except ValidationError:
        log.warning("Unparseable identity store error body (HTTP %s)", response.status_code)
        return IdentityStoreError(
            f"HTTP {response.status_code}", code=f"http-{response.status_code}"
        )

    code = error_code(payload.error.message)
    conflict_key = CONFLICT_KEYS_BY_CODE.get(code)
    if conflict_key is not None:
        return AccountConflictError(conflict_key, code=code)
    if code in NOT_FOUND_CODES:
        return AccountNotFoundError(account_id, code=code)
    return IdentityStoreError(payload.error.message, code=code)


def translate_account(account: UserInfo | AccountResponse) -> IdentityAccount:
    return IdentityAccount(
        id=account.local_id,
        email=account.email,
        phone_number=account.phone_number,
    )
