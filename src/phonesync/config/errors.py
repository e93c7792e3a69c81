"""Configuration error definitions."""

from __future__ import annotations

from phonesync.domain.errors import FailedPreconditionError


class ConfigurationError(FailedPreconditionError):
    """Settings or credentials needed to reach a store are invalid."""


class MissingConfigurationError(ConfigurationError):
    pass
