"""Email backfill and phone linking for phone-only directory records.

The write path runs in three steps: :mod:`.selection` picks eligible records
from a full directory scan, :mod:`.reconcile` (or :mod:`.linking`) handles one
candidate against the identity store, and :mod:`.orchestrator` fans candidates
out under a concurrency cap and aggregates the outcomes.
"""

from __future__ import annotations

from .linking import PhoneLinker
from .orchestrator import (
    DEFAULT_CONCURRENCY,
    BackfillRequest,
    LinkPhonesRequest,
    run_backfill,
    run_batch,
    run_phone_linking,
)
from .reconcile import AccountReconciler, PasswordPolicy, classify_failure
from .selection import select_candidates, select_phone_records

__all__ = [
    "DEFAULT_CONCURRENCY",
    "AccountReconciler",
    "BackfillRequest",
    "LinkPhonesRequest",
    "PasswordPolicy",
    "PhoneLinker",
    "classify_failure",
    "run_backfill",
    "run_batch",
    "run_phone_linking",
    "select_candidates",
    "select_phone_records",
]
