"""Tests for the command line interface."""

from unittest.mock import patch

import pytest

from gdrive_uploader.cli import _format_bytes, main
from gdrive_uploader.drive import BackendError, QuotaInfo
from gdrive_uploader.google import AuthorizationRequired


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("GDRIVE_UPLOADER_HOME", str(tmp_path))
    monkeypatch.setenv("GDRIVE_CLIENT_ID", "client-id")
    monkeypatch.setenv("GDRIVE_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("GDRIVE_USER_NAME", "alice")
    monkeypatch.delenv("GDRIVE_APP_NAME", raising=False)


@pytest.fixture
def drive_client():
    with patch("gdrive_uploader.drive.DriveClient") as mock_cls:
        yield mock_cls.return_value


class TestCli:
    """Command dispatch and output."""

    def test_no_command_prints_help(self, capsys):
        """Should print help and succeed without a command."""
        assert main([]) == 0
        assert "gdrive-uploader" in capsys.readouterr().out

    def test_quota(self, drive_client, capsys):
        """Should print used and total quota."""
        drive_client.get_quota.return_value = QuotaInfo(used=5_000_000_000, total=-1)

        assert main(["quota"]) == 0

        out = capsys.readouterr().out
        assert "4.66 GB" in out
        assert "unknown" in out
        drive_client.get_drive_service.assert_called_once_with(
            "client-id", "client-secret", "alice", interactive=False
        )

    def test_root(self, drive_client, capsys):
        """Should print the root folder id."""
        drive_client.get_root_folder_id.return_value = "0AbCdRoot"
        assert main(["root"]) == 0
        assert "0AbCdRoot" in capsys.readouterr().out

    def test_upload_defaults_to_root(self, drive_client, capsys):
        """Should upload into the root folder when no parent is given."""
        drive_client.get_root_folder_id.return_value = "0AbCdRoot"
        drive_client.upload_to_gdrive.return_value = "https://drive.google.com/open?id=f1"

        assert main(["upload", "report.pdf"]) == 0

        service = drive_client.get_drive_service.return_value
        drive_client.upload_to_gdrive.assert_called_once_with(service, "report.pdf", "0AbCdRoot")
        assert "https://drive.google.com/open?id=f1" in capsys.readouterr().out
        assert drive_client.add_progress_listener.called
        assert drive_client.add_completed_listener.called

    def test_upload_with_parent(self, drive_client):
        """Should use the given parent folder."""
        assert main(["upload", "report.pdf", "--parent", "folder123"]) == 0

        drive_client.get_root_folder_id.assert_not_called()
        assert drive_client.upload_to_gdrive.call_args[0][2] == "folder123"

    def test_upload_backend_error(self, drive_client, capsys):
        """Should report failures with a non-zero exit code."""
        drive_client.upload_to_gdrive.side_effect = BackendError("Drive upload failed")

        assert main(["upload", "report.pdf", "--parent", "p"]) == 1
        assert "Drive upload failed" in capsys.readouterr().out

    def test_requires_login(self, drive_client, capsys):
        """Should point at login when no token is cached."""
        drive_client.get_drive_service.side_effect = AuthorizationRequired(
            "https://accounts.google.com/o/oauth2/auth", "Run 'gdrive-uploader login'"
        )

        assert main(["quota"]) == 1
        assert "gdrive-uploader login" in capsys.readouterr().out

    def test_login_creates_token_store(self, drive_client, tmp_path, capsys):
        """Should create the token store and run the interactive flow."""
        assert main(["login", "--no-browser"]) == 0

        assert (tmp_path / "gdrive-uploader").is_dir()
        drive_client.get_drive_service.assert_called_once_with(
            "client-id", "client-secret", "alice", open_browser=False
        )
        assert "Authorized as alice" in capsys.readouterr().out

    def test_status_without_token(self, capsys):
        """Should report a missing token."""
        assert main(["status"]) == 1
        assert "No token for alice" in capsys.readouterr().out

    def test_status_without_credentials(self, monkeypatch, capsys):
        """Should report missing client credentials."""
        monkeypatch.delenv("GDRIVE_CLIENT_ID")
        assert main(["status"]) == 1
        assert "client id" in capsys.readouterr().out


class TestFormatBytes:
    """Human readable sizes."""

    def test_sentinel(self):
        assert _format_bytes(-1) == "unknown"

    def test_units(self):
        assert _format_bytes(512) == "512.00 B"
        assert _format_bytes(1536) == "1.50 KB"
        assert _format_bytes(15 * 1024**3) == "15.00 GB"
