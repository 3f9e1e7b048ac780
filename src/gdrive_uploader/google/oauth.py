"""Google OAuth management using Authlib.

This module provides the OAuth 2.0 authorization-code flow for the Drive API:
- Interactive consent with a pasted redirect URL
- Automatic token refresh with scope preservation
- A per-application token store keyed by user name
- Drive API service creation

Tokens are cached under the data root by default:
    <application name>/<user name>.json
"""

import json
import logging
import webbrowser
from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

import requests
from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2 import OAuth2Error
from google.oauth2.credentials import Credentials as GoogleCredentials
from googleapiclient.discovery import build

from gdrive_uploader import config
from gdrive_uploader.google.exceptions import (
    AuthorizationCancelled,
    CredentialsNotFoundError,
    ScopeMismatchError,
    TokenError,
)

logger = logging.getLogger(__name__)


# Drive OAuth scopes
SCOPES = {
    "drive": "https://www.googleapis.com/auth/drive",
    "drive_appdata": "https://www.googleapis.com/auth/drive.appdata",
    "drive_file": "https://www.googleapis.com/auth/drive.file",
    "drive_metadata": "https://www.googleapis.com/auth/drive.metadata",
    "drive_metadata_readonly": "https://www.googleapis.com/auth/drive.metadata.readonly",
    "drive_photos_readonly": "https://www.googleapis.com/auth/drive.photos.readonly",
    "drive_readonly": "https://www.googleapis.com/auth/drive.readonly",
    "drive_scripts": "https://www.googleapis.com/auth/drive.scripts",
}

# Requested by default. Broader than upload/quota/permission need; narrow via scopes=.
DRIVE_SCOPES = list(SCOPES)


class GoogleOAuth:
    """Google OAuth management using Authlib.

    Handles the OAuth 2.0 authorization flow, token storage and refresh,
    and Drive API service creation.

    Example:
        >>> auth = GoogleOAuth(client_id="...", client_secret="...", user_name="alice")
        >>> if not auth.is_authorized():
        ...     auth.authorize()
        >>> drive = auth.build_service("drive", "v3")
    """

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    REVOKE_URL = "https://oauth2.googleapis.com/revoke"
    REDIRECT_URI = "http://localhost"

    def __init__(
        self,
        scopes: list[str] | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        user_name: str | None = None,
        application_name: str | None = None,
        token_path: str | Path | None = None,
    ):
        """Initialize Google OAuth.

        Args:
            scopes: Scope names (e.g., ["drive", "drive_file"]) or full URLs.
                   If None, defaults to DRIVE_SCOPES.
            client_id: OAuth client ID (GDRIVE_CLIENT_ID if not provided).
            client_secret: OAuth client secret (GDRIVE_CLIENT_SECRET if not provided).
            user_name: Key of the cached token within the application's store.
            application_name: Identity of the running application; names the token store.
            token_path: Explicit token file, overriding the application/user location.
        """
        self.user_name = user_name or config.get_user_name()
        self.application_name = application_name or config.get_app_name()
        self.token_path = (
            Path(token_path)
            if token_path
            else config.token_path_for(self.user_name, self.application_name)
        )

        self.required_scopes = self._resolve_scopes(scopes or DRIVE_SCOPES)

        client_id = client_id or config.get_client_id()
        client_secret = client_secret or config.get_client_secret()
        if not client_id:
            raise CredentialsNotFoundError("client id")
        if not client_secret:
            raise CredentialsNotFoundError("client secret")

        self.client_id = client_id
        self.client_secret = client_secret

        self.session = OAuth2Session(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(self.required_scopes),
            redirect_uri=self.REDIRECT_URI,
            token=self._load_token(),
            update_token=self._save_token,
            token_endpoint=self.TOKEN_URL,
            grant_type="refresh_token",
            token_endpoint_auth_method="client_secret_post",
        )

        self._state: str | None = None
        self.last_refresh: datetime | None = None
        self.refresh_count = 0

    def _resolve_scopes(self, scopes: list[str]) -> list[str]:
        """Resolve scope names to full URLs."""
        resolved = []
        for scope in scopes:
            if scope.startswith("https://"):
                resolved.append(scope)
            elif scope in SCOPES:
                resolved.append(SCOPES[scope])
            else:
                raise ValueError(
                    f"Unknown scope: {scope}. Use full URL or one of: {list(SCOPES.keys())}"
                )
        return resolved

    def _load_token(self) -> dict[str, Any] | None:
        """Load token from the store, dropping it if scopes are missing."""
        if not self.token_path.exists():
            logger.info(f"No cached token for {self.user_name} at {self.token_path}")
            return None

        try:
            with open(self.token_path) as f:
                token_data = json.load(f)

            expiry = token_data.get("expiry")
            if expiry and isinstance(expiry, str):
                expires_at = datetime.fromisoformat(expiry.replace("Z", "+00:00")).timestamp()
            else:
                expires_at = expiry

            # Google token format -> Authlib format
            authlib_token = {
                "access_token": token_data.get("token"),
                "refresh_token": token_data.get("refresh_token"),
                "token_type": token_data.get("type", "Bearer"),
                "expires_at": expires_at,
                "scope": " ".join(token_data.get("scopes", [])),
            }

            current_scopes = set(token_data.get("scopes", []))
            missing = set(self.required_scopes) - current_scopes
            if missing:
                logger.warning(f"Cached token missing required scopes: {missing}")
                return None

            logger.info(f"Loaded cached token for {self.user_name}")
            return authlib_token

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load token from {self.token_path}: {e}")
            return None

    def _save_token(
        self,
        token: dict[str, Any],
        refresh_token: str | None = None,
        access_token: str | None = None,
    ):
        """Save token to the store (Authlib callback)."""
        if access_token:
            token["access_token"] = access_token
        if refresh_token:
            token["refresh_token"] = refresh_token

        # Google omits the scope on refresh responses
        token_scopes = set(token.get("scope", "").split()) or set(self.required_scopes)
        missing = set(self.required_scopes) - token_scopes
        if missing:
            raise ScopeMismatchError(missing)

        google_token = {
            "token": token["access_token"],
            "refresh_token": token.get("refresh_token"),
            "token_uri": self.TOKEN_URL,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scopes": sorted(token_scopes),
            "type": token.get("token_type", "Bearer"),
            "expiry": token.get("expires_at"),
            "_class": "google.oauth2.credentials.Credentials",
        }

        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.token_path, "w") as f:
            json.dump(google_token, f, indent=2)

        self.last_refresh = datetime.now()
        self.refresh_count += 1

        logger.info(f"Token saved for {self.user_name} at {self.token_path}")

    def is_authorized(self) -> bool:
        """Check if we have a token carrying all required scopes."""
        if not self.session.token:
            return False

        token_scopes = set(self.session.token.get("scope", "").split())
        return set(self.required_scopes).issubset(token_scopes)

    def get_authorization_url(self) -> str:
        """Start OAuth authorization flow.

        Returns:
            Authorization URL for user to visit.
        """
        authorization_url, state = self.session.create_authorization_url(
            self.AUTHORIZE_URL,
            access_type="offline",
            prompt="consent",
            include_granted_scopes="true",
        )

        self._state = state
        return authorization_url

    def fetch_token(self, authorization_response: str) -> dict[str, Any]:
        """Complete authorization flow and fetch token.

        Args:
            authorization_response: The full redirect URL from OAuth callback.

        Returns:
            The fetched OAuth token dict.

        Raises:
            TokenError: If the code exchange fails.
        """
        try:
            token = self.session.fetch_token(
                self.TOKEN_URL,
                authorization_response=authorization_response,
                client_secret=self.client_secret,
            )
        except (OAuth2Error, requests.RequestException) as e:
            raise TokenError(f"Failed to exchange authorization code: {e}") from e

        self._save_token(token)
        return token

    def authorize(
        self,
        prompt: Callable[[str], str] = input,
        open_browser: bool = True,
    ) -> dict[str, Any]:
        """Run the interactive consent flow, blocking until it completes.

        Args:
            prompt: Reads the redirect URL from the user.
            open_browser: Open the consent page in the default browser.

        Returns:
            The fetched OAuth token dict.

        Raises:
            AuthorizationCancelled: If no redirect URL is supplied.
            TokenError: If the code exchange fails.
        """
        url = self.get_authorization_url()
        logger.info(f"Requesting consent for {self.user_name}")
        print(f"Authorization URL:\n{url}\n")

        if open_browser:
            webbrowser.open(url)

        redirect_url = prompt("Paste redirect URL: ").strip()
        if not redirect_url:
            raise AuthorizationCancelled("No redirect URL provided; authorization aborted")

        return self.fetch_token(redirect_url)

    def get_credentials(self) -> GoogleCredentials:
        """Get Google Credentials object for API client libraries.

        Returns:
            Google Credentials object with current token.

        Raises:
            TokenError: If not authorized or token refresh fails.
        """
        if not self.is_authorized():
            raise TokenError("Not authorized or missing required scopes")

        expires_at = self.session.token.get("expires_at", 0)
        if expires_at and expires_at < datetime.now().timestamp():
            logger.info("Token expired, refreshing...")
            try:
                self.session.refresh_token(
                    self.TOKEN_URL,
                    refresh_token=self.session.token.get("refresh_token"),
                )
            except (OAuth2Error, requests.RequestException) as e:
                raise TokenError(f"Failed to refresh token: {e}") from e

        return GoogleCredentials(
            token=self.session.token["access_token"],
            refresh_token=self.session.token.get("refresh_token"),
            token_uri=self.TOKEN_URL,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=self.required_scopes,
        )

    def build_service(self, service_name: str = "drive", version: str = "v3"):
        """Build a Google API service with current credentials.

        Args:
            service_name: Name of the service.
            version: API version.

        Returns:
            Google API service object.
        """
        creds = self.get_credentials()
        return build(service_name, version, credentials=creds, cache_discovery=False)

    def revoke_token(self):
        """Revoke the current token and clear local storage."""
        if not self.session.token:
            logger.warning("No token to revoke")
            return

        try:
            self.session.post(
                self.REVOKE_URL,
                params={"token": self.session.token["access_token"]},
            )
        except Exception as e:
            logger.warning(f"Failed to revoke token remotely: {e}")

        if self.token_path.exists():
            self.token_path.unlink()

        logger.info("Token revoked successfully")

    def get_token_info(self) -> dict[str, Any]:
        """Get information about the current token.

        Returns:
            Dictionary with token status, scopes, expiry, etc.
        """
        if not self.session.token:
            return {"status": "no_token"}

        token = self.session.token
        expires_at = token.get("expires_at", 0)

        if expires_at:
            expires_in = expires_at - datetime.now().timestamp()
            expires_str = str(timedelta(seconds=max(0, expires_in)))
            is_expired = expires_at < datetime.now().timestamp()
        else:
            expires_str = "unknown"
            is_expired = False

        return {
            "status": "valid" if not is_expired else "expired",
            "user": self.user_name,
            "scopes": token.get("scope", "").split(),
            "expires_in": expires_str,
            "has_refresh_token": bool(token.get("refresh_token")),
            "refresh_count": self.refresh_count,
            "last_refresh": self.last_refresh.isoformat() if self.last_refresh else None,
        }
