"""File extension to MIME type resolution.

The default resolver asks the platform's association database first through
:mod:`mimetypes` (the Windows registry, or ``/etc/mime.types`` and friends
elsewhere), then a built-in table. Anything still unknown maps to
``application/unknown``.
"""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from pathlib import Path

DEFAULT_MIME_TYPE = "application/unknown"

# Built-in table, used where the platform knows nothing
STATIC_MIME_TYPES = {
    ".7z": "application/x-7z-compressed",
    ".avi": "video/x-msvideo",
    ".bmp": "image/bmp",
    ".csv": "text/csv",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".gif": "image/gif",
    ".gz": "application/gzip",
    ".htm": "text/html",
    ".html": "text/html",
    ".ico": "image/x-icon",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".js": "text/javascript",
    ".json": "application/json",
    ".md": "text/markdown",
    ".mkv": "video/x-matroska",
    ".mp3": "audio/mpeg",
    ".mp4": "video/mp4",
    ".odp": "application/vnd.oasis.opendocument.presentation",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".rar": "application/vnd.rar",
    ".rtf": "application/rtf",
    ".svg": "image/svg+xml",
    ".tar": "application/x-tar",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".txt": "text/plain",
    ".wav": "audio/wav",
    ".webm": "video/webm",
    ".webp": "image/webp",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xml": "application/xml",
    ".zip": "application/zip",
}


class MimeTypeResolver(ABC):
    """Base class for extension to MIME type lookups."""

    def __init__(self, default: str = DEFAULT_MIME_TYPE) -> None:
        self.default = default

    @abstractmethod
    def lookup(self, extension: str) -> str | None:
        """Return the type for a lower-cased extension, or None."""
        pass

    def resolve(self, file_name: str | Path) -> str:
        """Get the MIME type for a file name, never raising for unknown extensions."""
        extension = Path(file_name).suffix.lower()
        if not extension:
            return self.default
        return self.lookup(extension) or self.default


class StaticMimeTypeResolver(MimeTypeResolver):
    """Resolve MIME types from a fixed extension table."""

    def __init__(
        self,
        table: dict[str, str] | None = None,
        default: str = DEFAULT_MIME_TYPE,
    ) -> None:
        super().__init__(default)
        self.table = {k.lower(): v for k, v in (table or STATIC_MIME_TYPES).items()}

    def lookup(self, extension: str) -> str | None:
        return self.table.get(extension)


class PlatformMimeTypeResolver(StaticMimeTypeResolver):
    """Platform lookup first, then the built-in table."""

    def lookup(self, extension: str) -> str | None:
        mime_type, _ = mimetypes.guess_type(f"file{extension}", strict=False)
        return mime_type or super().lookup(extension)
