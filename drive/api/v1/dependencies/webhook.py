"""Webhook subscription dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from drive.application.use_cases.webhooks import WebhookSubscriptionService
from drive.infrastructure.persistence.database import get_db, get_db_transactional
from drive.infrastructure.persistence.repositories import (
    BucketRepository,
    WebhookRepository,
)


async def get_webhook_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> WebhookSubscriptionService:
    """WebhookSubscriptionService for read operations."""
    return WebhookSubscriptionService(WebhookRepository(db), BucketRepository(db))


async def get_webhook_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> WebhookSubscriptionService:
    """WebhookSubscriptionService for writes (transactional)."""
    return WebhookSubscriptionService(WebhookRepository(db), BucketRepository(db))
