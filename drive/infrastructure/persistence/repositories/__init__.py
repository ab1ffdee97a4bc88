"""Repositories: persistence adapters returning application DTOs."""

from drive.infrastructure.persistence.repositories.base import BaseRepository
from drive.infrastructure.persistence.repositories.bucket_repo import BucketRepository
from drive.infrastructure.persistence.repositories.resource_repo import (
    ResourceRepository,
)
from drive.infrastructure.persistence.repositories.webhook_repo import (
    WebhookRepository,
)

__all__ = [
    "BaseRepository",
    "BucketRepository",
    "ResourceRepository",
    "WebhookRepository",
]
