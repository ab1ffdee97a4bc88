"""Application use cases: one entry point per workflow."""

from drive.application.use_cases.resources import (
    ResourceDeletionService,
    ResourceQueryService,
    ResourceUploadService,
)
from drive.application.use_cases.webhooks import WebhookSubscriptionService

__all__ = [
    "ResourceDeletionService",
    "ResourceQueryService",
    "ResourceUploadService",
    "WebhookSubscriptionService",
]
