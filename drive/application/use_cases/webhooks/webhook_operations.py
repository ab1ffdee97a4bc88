"""Webhook subscription management: URL and custom-header CRUD scoped to an owned bucket."""

from __future__ import annotations

import re
from collections.abc import Mapping
from urllib.parse import urlparse

from drive.application.dtos.webhook import (
    WebhookHeaderResult,
    WebhookSubscriptionCreate,
    WebhookSubscriptionResult,
    WebhookSubscriptionUpdate,
)
from drive.application.interfaces.repositories import (
    IBucketRepository,
    IWebhookRepository,
)
from drive.application.use_cases.resources.resource_operations import get_owned_bucket
from drive.domain.enums import WebhookEventType
from drive.domain.exceptions import ResourceNotFoundException, ValidationException

# RFC 9110 token characters.
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")


def validate_webhook_url(url: str) -> str:
    """Return the URL stripped; it must be absolute http(s) with a host."""
    value = (url or "").strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise ValidationException(
            "Webhook URL must be an absolute http or https URL", field="url"
        )
    return value


def validate_event_type(event_type: str) -> str:
    if event_type not in WebhookEventType.values():
        raise ValidationException(
            f"Unknown event type {event_type!r}; expected one of "
            f"{', '.join(WebhookEventType.values())}",
            field="event_type",
        )
    return event_type


def validate_header(name: str, value: str) -> tuple[str, str]:
    """Header names must be HTTP tokens; values must not contain line breaks."""
    name = (name or "").strip()
    if not _HEADER_NAME_RE.fullmatch(name):
        raise ValidationException(f"Invalid header name: {name!r}", field="header_name")
    if "\r" in value or "\n" in value:
        raise ValidationException("Header value must not contain line breaks", field="header_value")
    return name, value


class WebhookSubscriptionService:
    """Single responsibility: manage a bucket's webhook subscriptions and their headers."""

    def __init__(
        self,
        webhook_repo: IWebhookRepository,
        bucket_repo: IBucketRepository,
    ) -> None:
        self.webhook_repo = webhook_repo
        self.bucket_repo = bucket_repo

    async def _get_owned(
        self, bucket_id: str, client_id: str, webhook_id: str
    ) -> WebhookSubscriptionResult:
        await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        subscription = await self.webhook_repo.get_for_bucket(bucket_id, webhook_id)
        if subscription is None:
            raise ResourceNotFoundException("webhook", webhook_id)
        return subscription

    async def create_subscription(
        self,
        bucket_id: str,
        client_id: str,
        url: str,
        event_type: str,
        is_active: bool = True,
        headers: Mapping[str, str] | None = None,
    ) -> WebhookSubscriptionResult:
        """Register url for event_type in the bucket.

        Raises:
            ResourceNotFoundException: Bucket missing or not owned.
            ValidationException: Bad URL, event type, or header.
            ConflictException: Same (url, event_type) already registered in the bucket.
        """
        await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        checked = dict(validate_header(n, v) for n, v in (headers or {}).items())
        return await self.webhook_repo.create_subscription(
            WebhookSubscriptionCreate(
                bucket_id=bucket_id,
                url=validate_webhook_url(url),
                event_type=validate_event_type(event_type),
                is_active=is_active,
                headers=checked,
            )
        )

    async def get_subscription(
        self, bucket_id: str, client_id: str, webhook_id: str
    ) -> WebhookSubscriptionResult:
        return await self._get_owned(bucket_id, client_id, webhook_id)

    async def list_subscriptions(
        self, bucket_id: str, client_id: str
    ) -> list[WebhookSubscriptionResult]:
        await get_owned_bucket(self.bucket_repo, bucket_id, client_id)
        return await self.webhook_repo.list_by_bucket(bucket_id)

    async def update_subscription(
        self,
        bucket_id: str,
        client_id: str,
        webhook_id: str,
        url: str | None = None,
        event_type: str | None = None,
        is_active: bool | None = None,
    ) -> WebhookSubscriptionResult:
        """Partial update with the same validation as create."""
        await self._get_owned(bucket_id, client_id, webhook_id)
        updated = await self.webhook_repo.update_subscription(
            webhook_id,
            WebhookSubscriptionUpdate(
                url=validate_webhook_url(url) if url is not None else None,
                event_type=validate_event_type(event_type) if event_type is not None else None,
                is_active=is_active,
            ),
        )
        if updated is None:
            raise ResourceNotFoundException("webhook", webhook_id)
        return updated

    async def delete_subscription(
        self, bucket_id: str, client_id: str, webhook_id: str
    ) -> None:
        await self._get_owned(bucket_id, client_id, webhook_id)
        await self.webhook_repo.delete_subscription(webhook_id)

    async def add_header(
        self,
        bucket_id: str,
        client_id: str,
        webhook_id: str,
        header_name: str,
        header_value: str,
    ) -> WebhookHeaderResult:
        """Raises ConflictException if the subscription already has this header."""
        await self._get_owned(bucket_id, client_id, webhook_id)
        name, value = validate_header(header_name, header_value)
        return await self.webhook_repo.add_header(webhook_id, name, value)

    async def update_header(
        self,
        bucket_id: str,
        client_id: str,
        webhook_id: str,
        header_name: str,
        header_value: str,
    ) -> WebhookHeaderResult:
        await self._get_owned(bucket_id, client_id, webhook_id)
        name, value = validate_header(header_name, header_value)
        header = await self.webhook_repo.update_header_value(webhook_id, name, value)
        if header is None:
            raise ResourceNotFoundException("webhook_header", header_name)
        return header

    async def delete_header(
        self, bucket_id: str, client_id: str, webhook_id: str, header_name: str
    ) -> None:
        await self._get_owned(bucket_id, client_id, webhook_id)
        if not await self.webhook_repo.delete_header(webhook_id, header_name):
            raise ResourceNotFoundException("webhook_header", header_name)
