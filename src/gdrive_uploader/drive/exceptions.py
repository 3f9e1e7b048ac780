"""Drive operation exceptions."""


class DriveError(Exception):
    """Base exception for Drive operations."""

    pass


class LocalIOError(DriveError):
    """Raised when the file to upload cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Cannot read {path}: {reason}")


class BackendError(DriveError):
    """Raised when a Drive API request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(DriveError):
    """Raised when a well-formed response lacks the requested identifier."""

    pass
