"""Read path resolving a phone number to the directory's login email."""

from __future__ import annotations

from typing import TYPE_CHECKING

from phonesync.domain.errors import (
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
)
from phonesync.domain.model import LookupResult
from phonesync.domain.phone import NON_PHONE_CHARS, normalize_phone

if TYPE_CHECKING:
    from phonesync.domain.ports import DirectoryStore


async def resolve_email_by_phone(directory: DirectoryStore, phone: str | None) -> LookupResult:
    raw = (phone or "").strip()
    if not raw:
        raise InvalidArgumentError("Missing phone")
    canonical = normalize_phone(raw)
    if not canonical:
        raise InvalidArgumentError(f"Unparseable phone: {raw!r}")

    matches = await directory.find_by_phone(canonical, limit=1)
    national = NON_PHONE_CHARS.sub("", raw)
    if not matches and national != canonical:
        # records written before normalisation still hold the national form
        matches = await directory.find_by_phone(national, limit=1)
    if not matches:
        raise NotFoundError("No directory record uses this phone number")
    record = matches[0]
    email = (record.email or "").strip()
    if not email:
        raise FailedPreconditionError("The record for this phone number has no email yet")
    return LookupResult(email=email, id=record.id)


__all__ = ["resolve_email_by_phone"]
