"""Identity Toolkit adapter for the identity-account store port."""

from __future__ import annotations

from .auth import GoogleCredentialsAuth
from .client import IdentityToolkitStore
from .schema import ErrorResponse, LookupAccountsResponse, UserInfo
from .translator import translate_error

__all__ = [
    "ErrorResponse",
    "GoogleCredentialsAuth",
    "IdentityToolkitStore",
    "LookupAccountsResponse",
    "UserInfo",
    "translate_error",
]
