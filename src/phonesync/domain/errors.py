"""Closed error taxonomy shared by the services and the callable surface."""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_ARGUMENT = "invalid-argument"
    NOT_FOUND = "not-found"
    FAILED_PRECONDITION = "failed-precondition"
    PERMISSION_DENIED = "permission-denied"
    UNAUTHENTICATED = "unauthenticated"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class ConflictKey(StrEnum):
    """Unique key of the identity store that collided with another account."""

    EMAIL = "email"
    PHONE = "phone"
    ID = "id"


class ServiceError(RuntimeError):
    """Base class for typed failures surfaced to callers."""

    kind: ErrorKind = ErrorKind.INTERNAL

    @property
    def code(self) -> str:
        return str(self.kind)


class InvalidArgumentError(ServiceError):
    kind = ErrorKind.INVALID_ARGUMENT


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class FailedPreconditionError(ServiceError):
    kind = ErrorKind.FAILED_PRECONDITION


class PermissionDeniedError(ServiceError):
    kind = ErrorKind.PERMISSION_DENIED


class UnauthenticatedError(ServiceError):
    kind = ErrorKind.UNAUTHENTICATED


class InternalError(ServiceError):
    kind = ErrorKind.INTERNAL


class IdentityStoreError(ServiceError):
    """Unclassified failure reported by the identity-account store."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.provider_code = code or message


class AccountConflictError(IdentityStoreError):
    """Another account already owns the email, phone number or id."""

    kind = ErrorKind.CONFLICT

    def __init__(self, key: ConflictKey, *, code: str | None = None) -> None:
        super().__init__(f"{key} already in use by another account", code=code)
        self.key = key


class AccountNotFoundError(IdentityStoreError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, account_id: str, *, code: str | None = None) -> None:
        super().__init__(f"Identity account not found: {account_id}", code=code)
        self.account_id = account_id


class DirectoryUnavailableError(InternalError):
    """Raised when the directory store cannot be read at all."""


__all__ = [
    "AccountConflictError",
    "AccountNotFoundError",
    "ConflictKey",
    "DirectoryUnavailableError",
    "ErrorKind",
    "FailedPreconditionError",
    "IdentityStoreError",
    "InternalError",
    "InvalidArgumentError",
    "NotFoundError",
    "PermissionDeniedError",
    "ServiceError",
    "UnauthenticatedError",
]
