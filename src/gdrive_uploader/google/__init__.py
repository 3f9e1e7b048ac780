"""Google OAuth utilities for the Drive API."""

from gdrive_uploader.google.exceptions import (
    AuthorizationCancelled,
    AuthorizationRequired,
    CredentialsNotFoundError,
    GoogleAuthError,
    ScopeMismatchError,
    TokenError,
)
from gdrive_uploader.google.oauth import DRIVE_SCOPES, GoogleOAuth

__all__ = [
    "GoogleOAuth",
    "DRIVE_SCOPES",
    "GoogleAuthError",
    "CredentialsNotFoundError",
    "TokenError",
    "ScopeMismatchError",
    "AuthorizationRequired",
    "AuthorizationCancelled",
]
