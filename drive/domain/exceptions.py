"""Domain exceptions for Drive.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DriveException(Exception):
    """Base exception for all Drive application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the API exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DriveException):
    """Raised when input validation fails (e.g. undeterminable extension, bad URL)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DriveException):
    """Raised when authentication fails (e.g. missing or invalid token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class ResourceNotFoundException(DriveException):
    """Raised when a requested entity is not found.

    Buckets that exist but belong to another client are reported the same
    way, so callers cannot discover which buckets exist.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of entity (e.g. 'bucket', 'resource', 'webhook').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ResourceAlreadyExistsException(DriveException):
    """Raised when an insert hits the (bucket, hash) unique constraint.

    Signals a lost dedup race, not a failure: the upload pipeline answers
    with the row that won.
    """

    def __init__(self, bucket_id: str, content_hash: str) -> None:
        super().__init__(
            f"Resource already exists in bucket {bucket_id}: {content_hash}",
            "RESOURCE_EXISTS",
            {"bucket_id": bucket_id, "hash": content_hash},
        )


class ConflictException(DriveException):
    """Raised when a registration duplicates an existing one (e.g. webhook URL per event type)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "CONFLICT", details)


class PayloadTooLargeException(DriveException):
    """Raised when an upload stream exceeds the configured maximum size."""

    def __init__(self, max_bytes: int) -> None:
        super().__init__(
            f"Upload exceeds maximum size of {max_bytes} bytes",
            "PAYLOAD_TOO_LARGE",
            {"max_bytes": max_bytes},
        )
