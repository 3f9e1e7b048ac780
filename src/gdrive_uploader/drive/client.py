"""Google Drive API client implementation."""

from __future__ import annotations

import contextlib
import io
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httplib2
from google.auth import exceptions as google_auth_exceptions
from googleapiclient.errors import HttpError
from googleapiclient.http import DEFAULT_CHUNK_SIZE, MediaIoBaseUpload

from gdrive_uploader import config
from gdrive_uploader.drive.events import (
    CompletedListener,
    ProgressListener,
    UploadCompleted,
    UploadProgress,
    UploadStatus,
)
from gdrive_uploader.drive.exceptions import BackendError, LocalIOError, NotFoundError
from gdrive_uploader.drive.mime import MimeTypeResolver, PlatformMimeTypeResolver
from gdrive_uploader.google import DRIVE_SCOPES, GoogleOAuth
from gdrive_uploader.google.exceptions import AuthorizationRequired

logger = logging.getLogger(__name__)

# Reported when the backend omits a quota field
UNKNOWN_QUOTA = -1

GOOGLE_DRIVE_URL = "https://drive.google.com/open?id="
ROOT_IDENTIFIER = "root"
STORAGE_QUOTA_FIELDS = "user,storageQuota"
ANYONE_READER_PERMISSION = {"type": "anyone", "role": "reader"}

_BACKEND_ERRORS = (
    HttpError,
    httplib2.HttpLib2Error,
    google_auth_exceptions.RefreshError,
    google_auth_exceptions.TransportError,
    OSError,
)


@dataclass(frozen=True)
class QuotaInfo:
    """Storage quota of an account, in bytes. -1 means not reported."""

    used: int
    total: int


def _to_backend_error(action: str, error: Exception) -> BackendError:
    status_code = error.resp.status if isinstance(error, HttpError) else None
    return BackendError(f"Drive {action} failed: {error}", status_code=status_code)


@contextlib.contextmanager
def _backend_call(action: str) -> Iterator[None]:
    """Convert API and transport failures into BackendError."""
    try:
        yield
    except _BACKEND_ERRORS as e:
        raise _to_backend_error(action, e) from e


def _quota_value(quota: dict[str, Any], field: str) -> int:
    value = quota.get(field)
    if value is None:
        return UNKNOWN_QUOTA
    return int(value)


class DriveClient:
    """Google Drive API client.

    Wraps quota inspection, file upload and root folder lookup. The Drive
    service handle is passed into every call; the client never caches it.

    Usage:
        client = DriveClient()
        client.add_progress_listener(lambda p: print(p.status, p.bytes_sent))

        service = client.get_drive_service(client_id, client_secret, "alice")
        url = client.upload_to_gdrive(service, "report.pdf", client.get_root_folder_id(service))

    Note:
        Every uploaded file is shared as "anyone with the link can read".
    """

    def __init__(
        self,
        scopes: list[str] | None = None,
        mime_resolver: MimeTypeResolver | None = None,
        application_name: str | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize Drive client.

        Args:
            scopes: OAuth scopes requested by get_drive_service. Defaults to DRIVE_SCOPES.
            mime_resolver: Extension to MIME type lookup. Defaults to PlatformMimeTypeResolver().
            application_name: Identity keying the token store. Defaults to GDRIVE_APP_NAME.
            chunk_size: Bytes per upload request; a multiple of 256 KiB.
        """
        self._scopes = list(scopes or DRIVE_SCOPES)
        self._mime_resolver = mime_resolver or PlatformMimeTypeResolver()
        self._application_name = application_name or config.get_app_name()
        self._chunk_size = chunk_size
        self._progress_listeners: list[ProgressListener] = []
        self._completed_listeners: list[CompletedListener] = []

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_progress_listener(self, listener: ProgressListener) -> None:
        self._progress_listeners.append(listener)

    def remove_progress_listener(self, listener: ProgressListener) -> None:
        self._progress_listeners.remove(listener)

    def add_completed_listener(self, listener: CompletedListener) -> None:
        self._completed_listeners.append(listener)

    def remove_completed_listener(self, listener: CompletedListener) -> None:
        self._completed_listeners.remove(listener)

    def _notify_progress(
        self, progress: UploadProgress, extra: ProgressListener | None = None
    ) -> None:
        for listener in list(self._progress_listeners):
            listener(progress)
        if extra is not None:
            extra(progress)

    def _notify_completed(
        self, completed: UploadCompleted, extra: CompletedListener | None = None
    ) -> None:
        for listener in list(self._completed_listeners):
            listener(completed)
        if extra is not None:
            extra(completed)

    # =========================================================================
    # Quota
    # =========================================================================

    def _get_storage_quota(self, service: Any) -> dict[str, Any]:
        with _backend_call("quota request"):
            about = service.about().get(fields=STORAGE_QUOTA_FIELDS).execute()
        return about.get("storageQuota") or {}

    def get_quota_used(self, service: Any) -> int:
        """Get the used quota of the account.

        Args:
            service: Drive v3 service handle.

        Returns:
            Bytes used, or -1 if the backend does not report usage.

        Raises:
            BackendError: If the request fails.
        """
        return _quota_value(self._get_storage_quota(service), "usage")

    def get_quota_total(self, service: Any) -> int:
        """Get the total quota of the account.

        Args:
            service: Drive v3 service handle.

        Returns:
            Quota limit in bytes, or -1 if no limit is reported. Accounts with
            unlimited storage report no limit and therefore also yield -1.

        Raises:
            BackendError: If the request fails.
        """
        return _quota_value(self._get_storage_quota(service), "limit")

    def get_quota(self, service: Any) -> QuotaInfo:
        """Get used and total quota from a single request."""
        quota = self._get_storage_quota(service)
        return QuotaInfo(
            used=_quota_value(quota, "usage"),
            total=_quota_value(quota, "limit"),
        )

    # =========================================================================
    # Files
    # =========================================================================

    def get_mime_type(self, file_name: str | Path) -> str:
        return self._mime_resolver.resolve(file_name)

    def _get_body(self, upload_file: str | Path, parent: str) -> dict[str, Any]:
        return {
            "name": Path(upload_file).name,
            "description": str(upload_file),
            "mimeType": self.get_mime_type(upload_file),
            "parents": [parent],
        }

    def upload_to_gdrive(
        self,
        service: Any,
        upload_file: str | Path,
        parent: str,
        on_progress: ProgressListener | None = None,
        on_completed: CompletedListener | None = None,
    ) -> str:
        """Upload a file, readable by anyone who has the link.

        Blocks until the upload and the permission grant finish. Listeners
        run on the calling thread between chunks.

        Args:
            service: Drive v3 service handle.
            upload_file: Local path of the file to upload.
            parent: Destination folder ID.
            on_progress: Progress callback for this call only.
            on_completed: Completion callback for this call only.

        Returns:
            The open link to the uploaded file.

        Raises:
            LocalIOError: If the file cannot be read.
            BackendError: If the upload or the permission grant fails. A file
                whose permission grant failed stays uploaded and unshared.
        """
        try:
            data = Path(upload_file).read_bytes()
        except OSError as e:
            raise LocalIOError(str(upload_file), e.strerror or str(e)) from e

        body = self._get_body(upload_file, parent)
        media = MediaIoBaseUpload(
            io.BytesIO(data),
            mimetype=body["mimeType"],
            chunksize=self._chunk_size,
            resumable=True,
        )
        logger.info(f"Uploading {body['name']} ({len(data)} bytes) to folder {parent}")

        request = service.files().create(body=body, media_body=media, fields="id, name")
        self._notify_progress(UploadProgress(UploadStatus.NOT_STARTED, 0), on_progress)

        bytes_sent = 0
        response = None
        while response is None:
            try:
                status, response = request.next_chunk()
            except _BACKEND_ERRORS as e:
                self._notify_progress(UploadProgress(UploadStatus.FAILED, bytes_sent), on_progress)
                raise _to_backend_error(f"upload of {body['name']}", e) from e
            if response is None and status is not None:
                bytes_sent = status.resumable_progress
                self._notify_progress(
                    UploadProgress(UploadStatus.IN_PROGRESS, bytes_sent), on_progress
                )

        self._notify_progress(UploadProgress(UploadStatus.COMPLETED, len(data)), on_progress)
        self._notify_completed(
            UploadCompleted(response.get("name") or body["name"]), on_completed
        )

        file_id = response["id"]
        self._create_permission_for_file(service, file_id)
        logger.info(f"Uploaded {body['name']} as {file_id}")
        return f"{GOOGLE_DRIVE_URL}{file_id}"

    def _create_permission_for_file(self, service: Any, file_id: str) -> None:
        try:
            with _backend_call(f"permission grant on {file_id}"):
                service.permissions().create(
                    fileId=file_id,
                    body=dict(ANYONE_READER_PERMISSION),
                    fields="id",
                ).execute()
        except BackendError:
            logger.warning(f"File {file_id} was uploaded but could not be shared")
            raise

    # =========================================================================
    # Folders
    # =========================================================================

    def get_root_folder_id(self, service: Any) -> str:
        """Get the root folder ID of the account.

        Raises:
            BackendError: If the request fails.
            NotFoundError: If the response carries no ID.
        """
        with _backend_call("root folder lookup"):
            result = service.files().get(fileId=ROOT_IDENTIFIER, fields="id").execute()
        folder_id = result.get("id")
        if not folder_id:
            raise NotFoundError("Drive returned no ID for the root folder")
        return folder_id

    # =========================================================================
    # Authentication
    # =========================================================================

    def get_auth(self, client_id: str, client_secret: str, user_name: str) -> GoogleOAuth:
        """Create the OAuth manager for a client/user pair."""
        return GoogleOAuth(
            scopes=self._scopes,
            client_id=client_id,
            client_secret=client_secret,
            user_name=user_name,
            application_name=self._application_name,
        )

    def get_drive_service(
        self,
        client_id: str,
        client_secret: str,
        user_name: str,
        interactive: bool = True,
        prompt: Callable[[str], str] = input,
        open_browser: bool = True,
    ) -> Any:
        """Get an authorized Drive v3 service handle.

        Uses the cached token for ``user_name`` when it carries the required
        scopes, otherwise runs the consent flow and blocks until it finishes.

        Args:
            client_id: OAuth client ID from the Google Cloud Console.
            client_secret: OAuth client secret.
            user_name: Key of the cached token.
            interactive: Allow the consent flow when no usable token is cached.
            prompt: Reads the pasted redirect URL.
            open_browser: Open the consent page in the default browser.

        Returns:
            Drive v3 service object.

        Raises:
            AuthorizationRequired: If consent is needed and interactive is False.
            AuthorizationCancelled: If the user supplies no redirect URL.
            TokenError: If code exchange or token refresh fails.
        """
        auth = self.get_auth(client_id, client_secret, user_name)
        if not auth.is_authorized():
            if not interactive:
                raise AuthorizationRequired(
                    auth.get_authorization_url(),
                    "Drive access requires OAuth authorization. "
                    "Run 'gdrive-uploader login' to authorize.",
                )
            auth.authorize(prompt=prompt, open_browser=open_browser)
        return auth.build_service("drive", "v3")
