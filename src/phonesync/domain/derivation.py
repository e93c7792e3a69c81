"""Deterministic synthetic email addresses for phone-only users."""

from __future__ import annotations

import re
from typing import Final

LOCAL_PART_PREFIX: Final[str] = "p"
MAX_LOCAL_PART_LENGTH: Final[int] = 64
FALLBACK_LOCAL_PART: Final[str] = "user"

_NON_DIGITS = re.compile(r"[^0-9]")


def derive_email(phone: str, domain: str) -> str:
    """Map ``phone`` to ``p<digits>@<domain>``.

    The same phone always yields the same address, which is what keeps
    repeated runs from provisioning a second email for one number.
    """

    digits = _NON_DIGITS.sub("", phone or "")
    local = (LOCAL_PART_PREFIX + digits)[:MAX_LOCAL_PART_LENGTH] if digits else ""
    return f"{local or FALLBACK_LOCAL_PART}@{domain}"


__all__ = ["FALLBACK_LOCAL_PART", "MAX_LOCAL_PART_LENGTH", "derive_email"]
