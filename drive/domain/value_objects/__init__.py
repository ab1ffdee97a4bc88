"""Domain value objects (immutable, self-validating)."""

from drive.domain.value_objects.core import (
    ContentDigest,
    FileExtension,
    build_filename,
)

__all__ = [
    "ContentDigest",
    "FileExtension",
    "build_filename",
]
