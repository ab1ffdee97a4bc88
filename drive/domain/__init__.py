"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from drive.domain.enums import WebhookEventType
from drive.domain.exceptions import (
    AuthenticationException,
    ConflictException,
    DriveException,
    PayloadTooLargeException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    ValidationException,
)
from drive.domain.value_objects import ContentDigest, FileExtension, build_filename

__all__ = [
    # Enums
    "WebhookEventType",
    # Exceptions
    "AuthenticationException",
    "ConflictException",
    "DriveException",
    "PayloadTooLargeException",
    "ResourceAlreadyExistsException",
    "ResourceNotFoundException",
    "ValidationException",
    # Value objects
    "ContentDigest",
    "FileExtension",
    "build_filename",
]
