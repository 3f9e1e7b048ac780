"""Centralized configuration.

Everything lives under a single data root (``~/.gdrive-uploader`` unless
``GDRIVE_UPLOADER_HOME`` is set):
    .env                               - GDRIVE_CLIENT_ID, GDRIVE_CLIENT_SECRET, ...
    <application name>/<user name>.json - cached OAuth tokens

This module auto-loads the .env file on import, so client credentials are
available to the CLI and any code that builds a DriveClient.
"""

import os
from pathlib import Path

DEFAULT_APP_NAME = "gdrive-uploader"
DEFAULT_USER_NAME = "user"


def get_data_root() -> Path:
    """Return the directory holding the .env file and token stores."""
    home = os.environ.get("GDRIVE_UPLOADER_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".gdrive-uploader"


ENV_FILE = get_data_root() / ".env"


def _load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from a file.

    Args:
        env_path: Path to .env file.

    Returns:
        Dictionary of loaded variables.
    """
    loaded = {}
    if not env_path.exists():
        return loaded

    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip()

            if (value.startswith('"') and value.endswith('"')) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]

            # Environment wins over the file
            if key and key not in os.environ:
                os.environ[key] = value
                loaded[key] = value

    return loaded


def get_client_id() -> str | None:
    return os.environ.get("GDRIVE_CLIENT_ID") or None


def get_client_secret() -> str | None:
    return os.environ.get("GDRIVE_CLIENT_SECRET") or None


def get_user_name() -> str:
    return os.environ.get("GDRIVE_USER_NAME") or DEFAULT_USER_NAME


def get_app_name() -> str:
    return os.environ.get("GDRIVE_APP_NAME") or DEFAULT_APP_NAME


def token_store_dir(application_name: str | None = None) -> Path:
    """Directory of cached tokens for one application identity."""
    return get_data_root() / (application_name or get_app_name())


def token_path_for(user_name: str, application_name: str | None = None) -> Path:
    """Token file for a user within an application's store."""
    return token_store_dir(application_name) / f"{user_name}.json"


def ensure_token_store(application_name: str | None = None) -> Path:
    """Create the token store directory if it doesn't exist.

    Returns:
        Path to the token store.
    """
    store = token_store_dir(application_name)
    store.mkdir(parents=True, exist_ok=True)
    return store


def get_credential_status() -> dict:
    """Get status of the configured credentials.

    Returns:
        Dictionary with credential status.
    """
    user_name = get_user_name()
    return {
        "data_root": str(get_data_root()),
        "env_file": ENV_FILE.exists(),
        "client_id": bool(get_client_id()),
        "client_secret": bool(get_client_secret()),
        "application": get_app_name(),
        "user": user_name,
        "token": token_path_for(user_name).exists(),
    }


# Auto-load .env from the data root on import
_loaded = _load_env_file(ENV_FILE)
