"""Infrastructure services: webhook dispatch."""

from drive.infrastructure.services.webhook_dispatcher import (
    WebhookDispatcher,
    default_headers,
    merge_headers,
)

__all__ = ["WebhookDispatcher", "default_headers", "merge_headers"]
