"""Directory, identity and outcome types used by the backfill services."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

ADMIN_ROLE: Final[str] = "admin"


@dataclass(slots=True, frozen=True)
class DirectoryRecord:
    """One user document of the directory store."""

    id: str
    phone: str | None = None
    email: str | None = None
    name: str | None = None
    community_scope: str | None = None
    role: str | None = None

    @property
    def has_phone(self) -> bool:
        return bool((self.phone or "").strip())

    @property
    def has_email(self) -> bool:
        return bool((self.email or "").strip())


@dataclass(slots=True, frozen=True)
class CandidateEntry:
    id: str
    canonical_phone: str
    name: str = ""
    community_scope: str = ""


@dataclass(slots=True, frozen=True)
class IdentityAccount:
    """Account as reported by the identity-account store."""

    id: str
    email: str | None = None
    phone_number: str | None = None


class OutcomeKind(StrEnum):
    PLANNED = "planned"
    CREATED = "created"
    UPDATED = "updated"
    CONFLICT = "conflict"
    NOT_FOUND = "notFound"
    INVALID = "invalid"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_KINDS


_FAILURE_KINDS = frozenset(
    {OutcomeKind.CONFLICT, OutcomeKind.NOT_FOUND, OutcomeKind.INVALID, OutcomeKind.ERROR}
)


@dataclass(slots=True, frozen=True)
class ReconciliationOutcome:
    """What happened when one candidate was reconciled."""

    id: str
    canonical_phone: str
    kind: OutcomeKind
    email: str | None = None
    detail: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {"id": self.id, "phone": self.canonical_phone, "action": str(self.kind)}
        if self.email is not None:
            payload["email"] = self.email
        if self.detail is not None:
            key = "error" if self.kind.is_failure else "detail"
            payload[key] = self.detail
        return payload


@dataclass(slots=True)
class BatchResult:
    """Aggregated counters and the ordered per-item log of one batch run."""

    items: list[ReconciliationOutcome] = field(default_factory=list)
    _counts: Counter[OutcomeKind] = field(default_factory=Counter, repr=False)

    def record(self, outcome: ReconciliationOutcome) -> None:
        self.items.append(outcome)
        self._counts[outcome.kind] += 1

    def count(self, kind: OutcomeKind) -> int:
        return self._counts[kind]

    @property
    def processed(self) -> int:
        return len(self.items)

    @property
    def planned(self) -> int:
        return self._counts[OutcomeKind.PLANNED]

    @property
    def created(self) -> int:
        return self._counts[OutcomeKind.CREATED]

    @property
    def updated(self) -> int:
        return self._counts[OutcomeKind.UPDATED]

    @property
    def conflicts(self) -> int:
        return self._counts[OutcomeKind.CONFLICT]

    @property
    def not_found(self) -> int:
        return self._counts[OutcomeKind.NOT_FOUND]

    @property
    def invalid(self) -> int:
        return self._counts[OutcomeKind.INVALID]

    @property
    def errors(self) -> int:
        return self._counts[OutcomeKind.ERROR]

    def to_payload(self) -> dict[str, object]:
        return {
            "processed": self.processed,
            "planned": self.planned,
            "created": self.created,
            "updated": self.updated,
            "conflicts": self.conflicts,
            "notFound": self.not_found,
            "invalid": self.invalid,
            "errors": self.errors,
            "items": [item.to_payload() for item in self.items],
        }


@dataclass(slots=True, frozen=True)
class LookupResult:
    email: str
    id: str


__all__ = [
    "ADMIN_ROLE",
    "BatchResult",
    "CandidateEntry",
    "DirectoryRecord",
    "IdentityAccount",
    "LookupResult",
    "OutcomeKind",
    "ReconciliationOutcome",
]
