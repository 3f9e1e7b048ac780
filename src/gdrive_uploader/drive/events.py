"""Payloads delivered to upload listeners."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class UploadStatus(Enum):
    """Transfer state reported with each progress notification."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadProgress:
    """Progress of a running upload."""

    status: UploadStatus
    bytes_sent: int = 0


@dataclass(frozen=True)
class UploadCompleted:
    """Fired once the backend confirms the created file."""

    file_name: str


ProgressListener = Callable[[UploadProgress], None]
CompletedListener = Callable[[UploadCompleted], None]
