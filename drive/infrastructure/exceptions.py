"""Infrastructure exceptions for storage and outbound webhook delivery.

Storage errors extend DriveException so presentation can map them
to HTTP responses consistently.
"""

from drive.domain.exceptions import DriveException


class StorageException(DriveException):
    """Base exception for content store operations."""


class StorageNotFoundError(StorageException):
    """Blob not found in the content store."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageWriteError(StorageException):
    """Writing or placing a blob failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {file_path}",
            "STORAGE_WRITE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageReadError(StorageException):
    """Reading a blob failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to read file: {file_path}",
            "STORAGE_READ_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Removing a blob failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class WebhookDeliveryError(DriveException):
    """Outbound webhook request failed at the transport level (timeout, refused, TLS).

    Never surfaced to API callers; the dispatcher logs it and moves on.
    """

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            f"Webhook delivery failed: {url}",
            "WEBHOOK_TRANSPORT_ERROR",
            {"url": url, "reason": reason},
        )
