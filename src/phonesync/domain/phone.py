"""Phone number normalisation for the Taiwanese numbering plan."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

NON_PHONE_CHARS = re.compile(r"[^0-9+]")

MIN_CANONICAL_LENGTH: Final[int] = 10


@dataclass(frozen=True, slots=True)
class NumberingPlan:
    """National mobile numbers rewritten to an international prefix."""

    international_prefix: str = "+886"
    trunk_prefix: str = "0"
    mobile_prefix: str = "9"
    national_length: int = 10

    def to_international(self, national: str) -> str | None:
        if len(national) != self.national_length:
            return None
        if not national.startswith(self.trunk_prefix + self.mobile_prefix):
            return None
        return self.international_prefix + national[len(self.trunk_prefix) :]


TAIWAN: Final[NumberingPlan] = NumberingPlan()


def normalize_phone(raw: str | None, *, plan: NumberingPlan = TAIWAN) -> str:
    """Return ``raw`` in canonical ``+<country><number>`` form where possible.

    Formatting characters are dropped. Input already starting with ``+`` is
    assumed canonical. National mobile numbers are rewritten using ``plan``;
    anything else is returned stripped but otherwise untouched, so callers have
    to check :func:`is_canonical` before relying on the value.
    """

    stripped = NON_PHONE_CHARS.sub("", raw or "")
    if not stripped or stripped.startswith("+"):
        return stripped
    return plan.to_international(stripped) or stripped


def is_canonical(phone: str) -> bool:
    return len(phone) >= MIN_CANONICAL_LENGTH


__all__ = [
    "MIN_CANONICAL_LENGTH",
    "NON_PHONE_CHARS",
    "TAIWAN",
    "NumberingPlan",
    "is_canonical",
    "normalize_phone",
]
