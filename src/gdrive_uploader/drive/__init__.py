"""Google Drive API client with OAuth authentication.

Upload files as link-shareable and inspect storage quota.

Usage:
    from gdrive_uploader.drive import DriveClient

    client = DriveClient()
    service = client.get_drive_service(client_id, client_secret, "alice")

    # Quota, -1 when not reported
    used = client.get_quota_used(service)
    total = client.get_quota_total(service)

    # Upload with progress reporting
    client.add_progress_listener(lambda p: print(p.status.value, p.bytes_sent))
    url = client.upload_to_gdrive(service, "/path/to/report.pdf", client.get_root_folder_id(service))

OAuth Setup:
    1. Create an OAuth client (Desktop app) in Google Cloud Console
    2. Put GDRIVE_CLIENT_ID and GDRIVE_CLIENT_SECRET in ~/.gdrive-uploader/.env
    3. Authorize: gdrive-uploader login
"""

from __future__ import annotations

from gdrive_uploader.drive.client import UNKNOWN_QUOTA, DriveClient, QuotaInfo
from gdrive_uploader.drive.events import UploadCompleted, UploadProgress, UploadStatus
from gdrive_uploader.drive.exceptions import (
    BackendError,
    DriveError,
    LocalIOError,
    NotFoundError,
)
from gdrive_uploader.drive.mime import (
    MimeTypeResolver,
    PlatformMimeTypeResolver,
    StaticMimeTypeResolver,
)

__all__ = [
    "DriveClient",
    "QuotaInfo",
    "UNKNOWN_QUOTA",
    "UploadProgress",
    "UploadCompleted",
    "UploadStatus",
    "MimeTypeResolver",
    "StaticMimeTypeResolver",
    "PlatformMimeTypeResolver",
    "DriveError",
    "LocalIOError",
    "BackendError",
    "NotFoundError",
]
