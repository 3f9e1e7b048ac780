"""Google authentication exceptions."""


class GoogleAuthError(Exception):
    """Base exception for Google authentication errors."""

    pass


class CredentialsNotFoundError(GoogleAuthError):
    """Raised when no OAuth client id/secret is available."""

    def __init__(self, missing: str = "client id and secret"):
        self.missing = missing
        super().__init__(
            f"OAuth {missing} not configured. "
            "Set GDRIVE_CLIENT_ID and GDRIVE_CLIENT_SECRET or pass them explicitly."
        )


class TokenError(GoogleAuthError):
    """Raised when there's an issue with the OAuth token."""

    pass


class ScopeMismatchError(GoogleAuthError):
    """Raised when token scopes don't match required scopes."""

    def __init__(self, missing_scopes: set[str]):
        self.missing_scopes = missing_scopes
        super().__init__(f"Token missing required scopes: {missing_scopes}")


class AuthorizationRequired(GoogleAuthError):
    """Raised when interactive consent is needed but cannot be obtained."""

    def __init__(self, authorization_url: str, message: str | None = None):
        self.authorization_url = authorization_url
        super().__init__(message or f"Authorization required. Visit: {authorization_url}")


class AuthorizationCancelled(GoogleAuthError):
    """Raised when the user abandons the consent flow."""

    pass
