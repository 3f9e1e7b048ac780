"""CLI for gdrive-uploader.

Usage:
    gdrive-uploader status                       # Show configuration and token status
    gdrive-uploader login                        # Interactive OAuth login
    gdrive-uploader revoke                       # Revoke the cached token
    gdrive-uploader quota                        # Show used and total storage
    gdrive-uploader root                         # Print the root folder id
    gdrive-uploader upload <path> [--parent ID]  # Upload and print the share link
"""

from __future__ import annotations

import argparse
import logging
import sys

from gdrive_uploader.drive.events import UploadCompleted, UploadProgress


def _format_bytes(size: int) -> str:
    if size < 0:
        return "unknown"
    value = float(size)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if value < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} PB"


def _credentials(args: argparse.Namespace) -> tuple[str | None, str | None, str]:
    from gdrive_uploader import config

    return (
        args.client_id or config.get_client_id(),
        args.client_secret or config.get_client_secret(),
        args.user or config.get_user_name(),
    )


def _get_service(args: argparse.Namespace, client):
    client_id, client_secret, user_name = _credentials(args)
    return client.get_drive_service(client_id, client_secret, user_name, interactive=False)


def cmd_status(args: argparse.Namespace) -> int:
    """Show configuration and token status."""
    from gdrive_uploader.config import get_credential_status
    from gdrive_uploader.google import GoogleAuthError, GoogleOAuth

    status = get_credential_status()

    print("=" * 60)
    print("GDRIVE-UPLOADER STATUS")
    print("=" * 60)
    print()
    print(f"Data root   : {status['data_root']}")
    print(f"Application : {status['application']}")
    print(f".env        : {'[x]' if status['env_file'] else '[ ]'}")
    print(f"Client ID   : {'[x]' if status['client_id'] else '[ ]'}")
    print(f"Secret      : {'[x]' if status['client_secret'] else '[ ]'}")
    print()

    client_id, client_secret, user_name = _credentials(args)
    try:
        auth = GoogleOAuth(
            client_id=client_id, client_secret=client_secret, user_name=user_name
        )
    except GoogleAuthError as e:
        print(f"Error: {e}")
        return 1

    info = auth.get_token_info()
    if info["status"] == "no_token":
        print(f"No token for {user_name} - run 'gdrive-uploader login'")
        return 1

    print(f"User       : {info['user']}")
    print(f"Status     : {info['status']}")
    print(f"Scopes     : {', '.join(info.get('scopes', []))}")
    print(f"Expires in : {info.get('expires_in', 'unknown')}")
    return 0


def cmd_login(args: argparse.Namespace) -> int:
    """Interactive OAuth login."""
    from gdrive_uploader.config import ensure_token_store
    from gdrive_uploader.drive import DriveClient
    from gdrive_uploader.google import GoogleAuthError

    client_id, client_secret, user_name = _credentials(args)

    print("=" * 60)
    print("GDRIVE-UPLOADER LOGIN")
    print("=" * 60)
    print(f"\nToken store: {ensure_token_store()}/")
    print("\nAfter granting access, copy the redirect URL back here.\n")

    try:
        DriveClient().get_drive_service(
            client_id,
            client_secret,
            user_name,
            open_browser=not args.no_browser,
        )
    except GoogleAuthError as e:
        print(f"\nError: {e}")
        return 1

    print(f"\nAuthorized as {user_name}")
    return 0


def cmd_revoke(args: argparse.Namespace) -> int:
    """Revoke the cached OAuth token."""
    from gdrive_uploader.google import CredentialsNotFoundError, GoogleOAuth

    client_id, client_secret, user_name = _credentials(args)
    try:
        auth = GoogleOAuth(
            client_id=client_id, client_secret=client_secret, user_name=user_name
        )
    except CredentialsNotFoundError:
        print("No credentials to revoke")
        return 0

    auth.revoke_token()
    print("Token revoked and local cache cleared")
    return 0


def cmd_quota(args: argparse.Namespace) -> int:
    """Show storage quota."""
    from gdrive_uploader.drive import DriveClient, DriveError
    from gdrive_uploader.google import GoogleAuthError

    client = DriveClient()
    try:
        quota = client.get_quota(_get_service(args, client))
    except (GoogleAuthError, DriveError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Used  : {_format_bytes(quota.used)}")
    print(f"Total : {_format_bytes(quota.total)}")
    return 0


def cmd_root(args: argparse.Namespace) -> int:
    """Print the root folder id."""
    from gdrive_uploader.drive import DriveClient, DriveError
    from gdrive_uploader.google import GoogleAuthError

    client = DriveClient()
    try:
        print(client.get_root_folder_id(_get_service(args, client)))
    except (GoogleAuthError, DriveError) as e:
        print(f"Error: {e}")
        return 1
    return 0


def _print_progress(progress: UploadProgress) -> None:
    print(f"  {progress.status.value:<12} {_format_bytes(progress.bytes_sent)}")


def _print_completed(completed: UploadCompleted) -> None:
    print(f"Uploaded {completed.file_name}")


def cmd_upload(args: argparse.Namespace) -> int:
    """Upload a file and print its share link."""
    from gdrive_uploader.drive import DriveClient, DriveError
    from gdrive_uploader.google import GoogleAuthError

    client = DriveClient()
    client.add_progress_listener(_print_progress)
    client.add_completed_listener(_print_completed)

    try:
        service = _get_service(args, client)
        parent = args.parent or client.get_root_folder_id(service)
        url = client.upload_to_gdrive(service, args.path, parent)
    except (GoogleAuthError, DriveError) as e:
        print(f"Error: {e}")
        return 1

    print(url)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gdrive-uploader",
        description="Upload files to Google Drive and inspect storage quota",
    )
    parser.add_argument("--client-id", help="OAuth client ID (default: GDRIVE_CLIENT_ID)")
    parser.add_argument(
        "--client-secret", help="OAuth client secret (default: GDRIVE_CLIENT_SECRET)"
    )
    parser.add_argument("--user", help="Token cache key (default: GDRIVE_USER_NAME)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("status", help="Show configuration and token status")

    login_parser = subparsers.add_parser("login", help="Interactive OAuth login")
    login_parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Don't open browser automatically",
    )

    subparsers.add_parser("revoke", help="Revoke token")
    subparsers.add_parser("quota", help="Show storage quota")
    subparsers.add_parser("root", help="Print root folder id")

    upload_parser = subparsers.add_parser("upload", help="Upload a file")
    upload_parser.add_argument("path", help="Local file to upload")
    upload_parser.add_argument("--parent", help="Destination folder id (default: root)")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "status": cmd_status,
        "login": cmd_login,
        "revoke": cmd_revoke,
        "quota": cmd_quota,
        "root": cmd_root,
        "upload": cmd_upload,
    }

    if args.command is None:
        parser.print_help()
        return 0

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
