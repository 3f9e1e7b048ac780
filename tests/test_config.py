"""Tests for configuration loading."""

import os
from unittest.mock import patch

from gdrive_uploader import config


class TestEnvFile:
    """The .env loader."""

    def test_missing_file(self, tmp_path):
        """Should load nothing when the file doesn't exist."""
        assert config._load_env_file(tmp_path / ".env") == {}

    def test_loads_values(self, tmp_path):
        """Should parse keys, strip quotes, and skip comments."""
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# OAuth client\n"
            "GDRIVE_TEST_CLIENT_ID=abc.apps.googleusercontent.com\n"
            "GDRIVE_TEST_SECRET=\"quoted secret\"\n"
            "not a pair\n"
        )
        with patch.dict(os.environ, {}, clear=False):
            loaded = config._load_env_file(env_file)
            assert os.environ["GDRIVE_TEST_SECRET"] == "quoted secret"

        assert loaded == {
            "GDRIVE_TEST_CLIENT_ID": "abc.apps.googleusercontent.com",
            "GDRIVE_TEST_SECRET": "quoted secret",
        }

    def test_environment_wins(self, tmp_path):
        """Should not override variables already set."""
        env_file = tmp_path / ".env"
        env_file.write_text("GDRIVE_TEST_USER=from-file\n")
        with patch.dict(os.environ, {"GDRIVE_TEST_USER": "from-env"}):
            assert config._load_env_file(env_file) == {}
            assert os.environ["GDRIVE_TEST_USER"] == "from-env"


class TestSettings:
    """Environment driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("GDRIVE_USER_NAME", raising=False)
        monkeypatch.delenv("GDRIVE_APP_NAME", raising=False)
        assert config.get_user_name() == "user"
        assert config.get_app_name() == "gdrive-uploader"

    def test_token_store_layout(self, tmp_path, monkeypatch):
        """Should key token files by application and user."""
        monkeypatch.setenv("GDRIVE_UPLOADER_HOME", str(tmp_path))
        monkeypatch.setenv("GDRIVE_APP_NAME", "uploader-app")

        assert config.token_path_for("alice") == tmp_path / "uploader-app" / "alice.json"
        assert config.ensure_token_store().is_dir()

    def test_credential_status(self, tmp_path, monkeypatch):
        """Should report configured client credentials."""
        monkeypatch.setenv("GDRIVE_UPLOADER_HOME", str(tmp_path))
        monkeypatch.setenv("GDRIVE_CLIENT_ID", "id")
        monkeypatch.delenv("GDRIVE_CLIENT_SECRET", raising=False)

        status = config.get_credential_status()
        assert status["client_id"] is True
        assert status["client_secret"] is False
        assert status["token"] is False
