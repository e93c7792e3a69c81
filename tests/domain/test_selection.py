from __future__ import annotations

import pytest

from phonesync.domain.backfill.selection import select_candidates, select_phone_records
from phonesync.domain.model import CandidateEntry, DirectoryRecord

RECORDS = (
    DirectoryRecord(id="u1", phone="0912345678", name="Amy", community_scope="A101"),
    DirectoryRecord(id="u2", phone="0922333444", email="known@ex.com", community_scope="A101"),
    DirectoryRecord(id="u3", phone="   ", community_scope="A101"),
    DirectoryRecord(id="u4", phone=None),
    DirectoryRecord(id="u5", phone="+886933444555", email="  ", community_scope="B202"),
    DirectoryRecord(id="u6", phone="12345"),
)


def test_select_candidates_keeps_phone_only_records() -> None:
    candidates = select_candidates(RECORDS)

    assert [candidate.id for candidate in candidates] == ["u1", "u5", "u6"]
    assert candidates[0] == CandidateEntry(
        id="u1", canonical_phone="+886912345678", name="Amy", community_scope="A101"
    )


def test_select_candidates_never_returns_records_with_email() -> None:
    candidates = select_candidates(RECORDS)

    assert "u2" not in {candidate.id for candidate in candidates}


def test_select_candidates_never_returns_records_without_phone() -> None:
    ids = {candidate.id for candidate in select_candidates(RECORDS)}

    assert ids.isdisjoint({"u3", "u4"})


def test_select_candidates_filters_by_community() -> None:
    candidates = select_candidates(RECORDS, community_scope="B202")

    assert [candidate.id for candidate in candidates] == ["u5"]


@pytest.mark.parametrize(("limit", "expected"), [(None, 3), (0, 3), (-4, 3), (2, 2), (50, 3)])
def test_select_candidates_limit(limit: int | None, expected: int) -> None:
    assert len(select_candidates(RECORDS, limit=limit)) == expected


def test_select_phone_records_ignores_email() -> None:
    records = select_phone_records(RECORDS, community_scope="A101")

    assert [record.id for record in records] == ["u1", "u2"]
