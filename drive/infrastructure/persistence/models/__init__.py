"""Persistence models: ORM entities and mixins."""

from drive.infrastructure.persistence.models.bucket import Bucket
from drive.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from drive.infrastructure.persistence.models.resource import Resource
from drive.infrastructure.persistence.models.webhook import WebhookHeader, WebhookUrl

__all__ = [
    "Bucket",
    "CreatedAtMixin",
    "CuidMixin",
    "Resource",
    "TimestampMixin",
    "WebhookHeader",
    "WebhookUrl",
]
