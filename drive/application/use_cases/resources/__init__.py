"""Resource use cases: upload, query, delete."""

from drive.application.use_cases.resources.resource_operations import (
    ResourceDeletionService,
    ResourceQueryService,
    ResourceUploadService,
)

__all__ = [
    "ResourceDeletionService",
    "ResourceQueryService",
    "ResourceUploadService",
]
