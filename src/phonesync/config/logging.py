"""Logging setup for command-line entry points."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(default: int = logging.INFO) -> int:
    name = optional_env_var("PHONESYNC_LOG_LEVEL")
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise ConfigurationError(f"PHONESYNC_LOG_LEVEL is not a logging level: {name!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Set up the root logger with a terse CLI format.

    ``level`` defaults to ``PHONESYNC_LOG_LEVEL`` (``INFO`` when unset). httpx
    request lines stay at WARNING or above so per-candidate logs remain readable.
    """

    effective = level if level is not None else resolve_log_level()
    logging.basicConfig(level=effective, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    logging.getLogger("httpx").setLevel(max(effective, logging.WARNING))
