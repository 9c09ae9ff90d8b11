"""Infrastructure exceptions for persistence, storage and external operations.

All extend StoreException so presentation maps backend faults to one
response shape (STORE_ERROR family, 503).
"""

from app.domain.exceptions import StoreException


class DatabaseNotConfiguredError(StoreException):
    """An operation requires the SQL database but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            "connect",
            "This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class StorageException(StoreException):
    """Base exception for evidence storage operations."""


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            "store_images",
            reason,
            error_code="STORAGE_UPLOAD_ERROR",
            file_path=file_path,
        )


class StorageChecksumMismatchError(StorageException):
    """Checksum validation failed (corrupted write)."""

    def __init__(self, file_path: str, expected: str, actual: str) -> None:
        super().__init__(
            "store_images",
            f"Checksum mismatch for file: {file_path}",
            error_code="STORAGE_CHECKSUM_ERROR",
            file_path=file_path,
            expected=expected,
            actual=actual,
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            operation,
            f"Permission denied for {operation} on {file_path}",
            error_code="STORAGE_PERMISSION_ERROR",
            file_path=file_path,
        )
