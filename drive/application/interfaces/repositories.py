"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from drive.application.dtos.bucket import BucketResult
    from drive.application.dtos.resource import ResourceCreate, ResourceResult
    from drive.application.dtos.webhook import (
        WebhookHeaderResult,
        WebhookSubscriptionCreate,
        WebhookSubscriptionResult,
        WebhookSubscriptionUpdate,
    )


# Bucket repository interface
class IBucketRepository(Protocol):
    """Protocol for bucket lookups (buckets are managed outside this service)."""

    async def get_by_id(self, bucket_id: str) -> BucketResult | None:
        """Return bucket by id or None."""


# Resource repository interface
class IResourceRepository(Protocol):
    """Protocol for resource metadata persistence (DIP)."""

    async def get_by_bucket_and_hash(
        self, bucket_id: str, content_hash: str
    ) -> ResourceResult | None:
        """Return the resource with this digest in the bucket, or None."""

    async def list_by_bucket(
        self, bucket_id: str, skip: int = 0, limit: int = 100
    ) -> list[ResourceResult]:
        """Return resources in the bucket, newest first."""

    async def create_resource(self, data: ResourceCreate) -> ResourceResult:
        """Insert a resource row. Raises ResourceAlreadyExistsException on (bucket, hash) collision."""

    async def delete_by_bucket_and_hash(self, bucket_id: str, content_hash: str) -> bool:
        """Delete the row; return False if it was already gone."""


# Webhook repository interface
class IWebhookRepository(Protocol):
    """Protocol for webhook subscription and header persistence (DIP)."""

    async def list_active_by_bucket_and_event_type(
        self, bucket_id: str, event_type: str
    ) -> list[WebhookSubscriptionResult]:
        """Return active subscriptions for the bucket and event, with headers."""

    async def list_by_bucket(self, bucket_id: str) -> list[WebhookSubscriptionResult]:
        """Return all subscriptions of the bucket, with headers."""

    async def get_for_bucket(
        self, bucket_id: str, webhook_id: str
    ) -> WebhookSubscriptionResult | None:
        """Return one subscription of the bucket, with headers."""

    async def create_subscription(
        self, data: WebhookSubscriptionCreate
    ) -> WebhookSubscriptionResult:
        """Insert subscription and headers. Raises ConflictException on duplicates."""

    async def update_subscription(
        self, webhook_id: str, data: WebhookSubscriptionUpdate
    ) -> WebhookSubscriptionResult | None:
        """Apply a partial update. Raises ConflictException on duplicates."""

    async def delete_subscription(self, webhook_id: str) -> bool:
        """Delete subscription and its headers."""

    async def get_header(
        self, webhook_id: str, header_name: str
    ) -> WebhookHeaderResult | None:
        """Return one custom header or None."""

    async def add_header(
        self, webhook_id: str, header_name: str, header_value: str
    ) -> WebhookHeaderResult:
        """Add a custom header. Raises ConflictException if the name is taken."""

    async def update_header_value(
        self, webhook_id: str, header_name: str, header_value: str
    ) -> WebhookHeaderResult | None:
        """Replace a header value; None if the header does not exist."""

    async def delete_header(self, webhook_id: str, header_name: str) -> bool:
        """Delete one custom header."""


# Unit of work interface
class IUnitOfWork(Protocol):
    """Protocol for an explicit transaction boundary shared by the repositories of one request."""

    async def begin(self) -> None:
        """Start a write transaction (ends any read transaction still open)."""

    async def commit(self) -> None:
        """Make the writes of the current transaction durable."""

    async def rollback(self) -> None:
        """Discard the current transaction."""
