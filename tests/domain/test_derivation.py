from __future__ import annotations

from phonesync.domain.derivation import MAX_LOCAL_PART_LENGTH, derive_email


def test_derive_email_from_canonical_phone() -> None:
    assert derive_email("+886912345678", "example.com") == "p886912345678@example.com"


def test_derive_email_is_deterministic() -> None:
    first = derive_email("+886912345678", "ex.com")
    second = derive_email("+886912345678", "ex.com")

    assert first == second


def test_distinct_phones_yield_distinct_local_parts() -> None:
    phones = ["+886912345678", "+886912345679", "+886987654321", "+81901234567"]

    emails = {derive_email(phone, "ex.com") for phone in phones}

    assert len(emails) == len(phones)


def test_derive_email_truncates_long_local_part() -> None:
    email = derive_email("+" + "1" * 100, "ex.com")

    local, _, domain = email.partition("@")
    assert len(local) == MAX_LOCAL_PART_LENGTH
    assert local.startswith("p1")
    assert domain == "ex.com"


def test_derive_email_falls_back_without_digits() -> None:
    assert derive_email("", "ex.com") == "user@ex.com"
    assert derive_email("+", "ex.com") == "user@ex.com"
