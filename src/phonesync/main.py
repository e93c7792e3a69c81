from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from phonesync.app import backfill_emails, link_phones, lookup_email
from phonesync.config import ConfigurationError, configure_logging, optional_env_var
from phonesync.domain.backfill import BackfillRequest, LinkPhonesRequest
from phonesync.domain.errors import ServiceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _add_batch_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report what would change; no identity or directory writes",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of directory records to process (0 or absent: all)",
    )
    parser.add_argument(
        "--community",
        type=str,
        default=None,
        help="Only process records with this service community code",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile directory phones and accounts")
    subparsers = parser.add_subparsers(dest="command", required=True)

    backfill = subparsers.add_parser(
        "backfill",
        help="Derive emails for phone-only users and provision their identity accounts",
    )
    backfill.add_argument(
        "--domain",
        type=str,
        default=None,
        help="Email domain for derived addresses (defaults to PHONESYNC_EMAIL_DOMAIN)",
    )
    backfill.add_argument(
        "--password",
        type=str,
        default=None,
        help="Shared password for every account (min. 6 characters; random otherwise)",
    )
    _add_batch_arguments(backfill)

    link = subparsers.add_parser(
        "link-phones",
        help="Set the directory phone number on existing identity accounts",
    )
    _add_batch_arguments(link)

    lookup = subparsers.add_parser("lookup", help="Resolve the login email for a phone number")
    lookup.add_argument("phone", type=str, help="Phone number in national or +E.164 form")

    return parser.parse_args(list(argv))


def _resolve_domain(args: argparse.Namespace) -> str:
    domain = (args.domain or optional_env_var("PHONESYNC_EMAIL_DOMAIN") or "").strip()
    if not domain:
        raise ValueError("Missing --domain (or PHONESYNC_EMAIL_DOMAIN)")
    return domain


def _validate_limit(limit: int | None) -> int | None:
    if limit is not None and limit < 0:
        raise ValueError("Limit must be non-negative")
    return limit


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging()
        parsed_args = _parse_args(args_list)
        if parsed_args.command in {"backfill", "link-phones"}:
            _validate_limit(parsed_args.limit)
        domain = _resolve_domain(parsed_args) if parsed_args.command == "backfill" else ""
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "backfill":
            result = backfill_emails(
                BackfillRequest(
                    domain=domain,
                    password=parsed_args.password,
                    limit=parsed_args.limit,
                    dry_run=parsed_args.dry_run,
                    community_scope=parsed_args.community,
                )
            )
            log.info("Backfill result: %s", _summary(result.to_payload()))
        elif parsed_args.command == "link-phones":
            result = link_phones(
                LinkPhonesRequest(
                    limit=parsed_args.limit,
                    dry_run=parsed_args.dry_run,
                    community_scope=parsed_args.community,
                )
            )
            log.info("Phone linking result: %s", _summary(result.to_payload()))
        elif parsed_args.command == "lookup":
            found = lookup_email(parsed_args.phone)
            print(f"{found.email}\t{found.id}")  # noqa: T201
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ServiceError as exc:
        log.error("%s: %s", exc.code, exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during run")
        sys.exit(1)


def _summary(payload: dict[str, object]) -> str:
    return ", ".join(f"{key}={value}" for key, value in payload.items() if key != "items")


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
