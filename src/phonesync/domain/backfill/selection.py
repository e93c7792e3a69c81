"""Candidate selection over a full directory scan."""

from __future__ import annotations

from typing import TYPE_CHECKING

from phonesync.domain.model import CandidateEntry
from phonesync.domain.phone import normalize_phone

if TYPE_CHECKING:
    from collections.abc import Iterable

    from phonesync.domain.model import DirectoryRecord


def select_candidates(
    records: Iterable[DirectoryRecord],
    *,
    community_scope: str | None = None,
    limit: int | None = None,
) -> list[CandidateEntry]:
    """Return records that have a phone but no email yet."""

    return _select(
        records,
        community_scope=community_scope,
        limit=limit,
        require_missing_email=True,
    )


def select_phone_records(
    records: Iterable[DirectoryRecord],
    *,
    community_scope: str | None = None,
    limit: int | None = None,
) -> list[CandidateEntry]:
    """Return every record with a phone, whether or not an email is set."""

    return _select(
        records,
        community_scope=community_scope,
        limit=limit,
        require_missing_email=False,
    )


def apply_limit[T](items: list[T], limit: int | None) -> list[T]:
    if limit is None or limit <= 0:
        return items
    return items[:limit]


def _select(
    records: Iterable[DirectoryRecord],
    *,
    community_scope: str | None,
    limit: int | None,
    require_missing_email: bool,
) -> list[CandidateEntry]:
    scope = community_scope or None
    candidates: list[CandidateEntry] = []
    for record in records:
        if not record.has_phone:
            continue
        if require_missing_email and record.has_email:
            continue
        if scope is not None and (record.community_scope or "") != scope:
            continue
        candidates.append(
            CandidateEntry(
                id=record.id,
                canonical_phone=normalize_phone((record.phone or "").strip()),
                name=record.name or "",
                community_scope=record.community_scope or "",
            )
        )
    return apply_limit(candidates, limit)


__all__ = ["apply_limit", "select_candidates", "select_phone_records"]
