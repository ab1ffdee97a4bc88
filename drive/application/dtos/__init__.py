"""Application DTOs (no dependency on ORM or HTTP schemas)."""

from drive.application.dtos.bucket import BucketResult
from drive.application.dtos.notification import NotificationEvent
from drive.application.dtos.resource import (
    ResourceContent,
    ResourceCreate,
    ResourceResult,
    ResourceUploadResult,
    ResourceView,
)
from drive.application.dtos.webhook import (
    WebhookHeaderResult,
    WebhookSubscriptionCreate,
    WebhookSubscriptionResult,
    WebhookSubscriptionUpdate,
)

__all__ = [
    "BucketResult",
    "NotificationEvent",
    "ResourceContent",
    "ResourceCreate",
    "ResourceResult",
    "ResourceUploadResult",
    "ResourceView",
    "WebhookHeaderResult",
    "WebhookSubscriptionCreate",
    "WebhookSubscriptionResult",
    "WebhookSubscriptionUpdate",
]
