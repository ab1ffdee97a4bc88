"""Webhook subscription use cases."""

from drive.application.use_cases.webhooks.webhook_operations import (
    WebhookSubscriptionService,
)

__all__ = ["WebhookSubscriptionService"]
