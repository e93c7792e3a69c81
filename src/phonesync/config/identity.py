"""Identity-account store configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

import google.auth
from google.auth.exceptions import DefaultCredentialsError
from google.oauth2 import service_account

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from google.auth.credentials import Credentials

log = getLogger(__name__)

IDENTITY_TOOLKIT_BASE_URL: Final[str] = "https://identitytoolkit.googleapis.com/v1/"
IDENTITY_TIMEOUT_SECONDS: Final[float] = 10.0
IDENTITY_SCOPES: Final[tuple[str, ...]] = ("https://www.googleapis.com/auth/cloud-platform",)
DEFAULT_SERVICE_ACCOUNT_FILE: Final[str] = "service-account.json"


@dataclass(frozen=True, slots=True)
class IdentityStoreConfig:
    """Holds identity store access values."""

    project_id: str
    resilience: ResilienceConfig
    credentials: Credentials | None = None


def load_credentials() -> tuple[Credentials, str | None]:
    """Return credentials and their project, trying ADC before a local key file.

    Application Default Credentials cover ``GOOGLE_APPLICATION_CREDENTIALS`` and
    the metadata server. The fallback key file is ``IDENTITY_SERVICE_ACCOUNT_FILE``
    or ``service-account.json`` in the working directory.
    """

    try:
        return google.auth.default(scopes=IDENTITY_SCOPES)
    except DefaultCredentialsError as exc:
        path = Path(
            optional_env_var("IDENTITY_SERVICE_ACCOUNT_FILE") or DEFAULT_SERVICE_ACCOUNT_FILE
        )
        if not path.is_file():
            raise ConfigurationError(
                f"No Google credentials found: set GOOGLE_APPLICATION_CREDENTIALS or provide {path}"
            ) from exc
        log.info("Application default credentials unavailable; using %s", path)
        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(path), scopes=IDENTITY_SCOPES
            )
        except (OSError, ValueError) as file_exc:
            raise ConfigurationError(
                f"Unusable service account file {path}: {file_exc}"
            ) from file_exc
        return credentials, credentials.project_id


def get_identity_config(
    *,
    credentials: Credentials | None = None,
    resilience: ResilienceConfig | None = None,
) -> IdentityStoreConfig:
    project_id = optional_env_var("IDENTITY_PROJECT_ID")
    if credentials is None:
        credentials, detected_project = load_credentials()
        project_id = project_id or detected_project
    if not project_id:
        project_id = require_env_vars(("IDENTITY_PROJECT_ID",))["IDENTITY_PROJECT_ID"]

    base_url = optional_env_var("IDENTITY_BASE_URL") or IDENTITY_TOOLKIT_BASE_URL
    if not base_url.endswith("/"):
        base_url += "/"
    return IdentityStoreConfig(
        project_id=project_id,
        credentials=credentials,
        resilience=resilience
        or ResilienceConfig(
            name="identity",
            base_url=base_url,
            timeout_seconds=IDENTITY_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
