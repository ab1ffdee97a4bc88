"""Webhook repository: subscriptions (webhook_url) and custom headers (webhook_header).

Returns application DTOs with headers attached, ordered by header name.
"""

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from drive.application.dtos.webhook import (
    WebhookHeaderResult,
    WebhookSubscriptionCreate,
    WebhookSubscriptionResult,
    WebhookSubscriptionUpdate,
)
from drive.domain.exceptions import ConflictException, DriveException
from drive.infrastructure.persistence.models.webhook import WebhookHeader, WebhookUrl
from drive.infrastructure.persistence.repositories.base import BaseRepository
from drive.shared.utils.datetime import ensure_utc

_DUPLICATE_SUBSCRIPTION = "Webhook URL already registered for this event type in the bucket"


def _header_to_result(h: WebhookHeader) -> WebhookHeaderResult:
    return WebhookHeaderResult(
        id=h.id,
        webhook_url_id=h.webhook_url_id,
        header_name=h.header_name,
        header_value=h.header_value,
        created_at=ensure_utc(h.created_at) or h.created_at,
    )


def _subscription_to_result(
    w: WebhookUrl, headers: Sequence[WebhookHeader] = ()
) -> WebhookSubscriptionResult:
    return WebhookSubscriptionResult(
        id=w.id,
        bucket_id=w.bucket_id,
        url=w.url,
        event_type=w.event_type,
        is_active=w.is_active,
        created_at=ensure_utc(w.created_at) or w.created_at,
        updated_at=ensure_utc(w.updated_at) or w.updated_at,
        headers=tuple(_header_to_result(h) for h in headers),
    )


class WebhookRepository(BaseRepository[WebhookUrl]):
    """Webhook subscription repository (IWebhookRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WebhookUrl)

    async def _with_headers(
        self, rows: Sequence[WebhookUrl]
    ) -> list[WebhookSubscriptionResult]:
        """Load headers for all rows in one query and attach them."""
        if not rows:
            return []
        result = await self.db.execute(
            select(WebhookHeader)
            .where(WebhookHeader.webhook_url_id.in_([r.id for r in rows]))
            .order_by(WebhookHeader.header_name)
        )
        by_url: dict[str, list[WebhookHeader]] = defaultdict(list)
        for header in result.scalars().all():
            by_url[header.webhook_url_id].append(header)
        return [_subscription_to_result(r, by_url[r.id]) for r in rows]

    async def list_active_by_bucket_and_event_type(
        self, bucket_id: str, event_type: str
    ) -> list[WebhookSubscriptionResult]:
        result = await self.db.execute(
            select(WebhookUrl)
            .where(
                WebhookUrl.bucket_id == bucket_id,
                WebhookUrl.event_type == event_type,
                WebhookUrl.is_active.is_(True),
            )
            .order_by(WebhookUrl.created_at, WebhookUrl.id)
        )
        return await self._with_headers(list(result.scalars().all()))

    async def list_by_bucket(self, bucket_id: str) -> list[WebhookSubscriptionResult]:
        result = await self.db.execute(
            select(WebhookUrl)
            .where(WebhookUrl.bucket_id == bucket_id)
            .order_by(WebhookUrl.created_at, WebhookUrl.id)
        )
        return await self._with_headers(list(result.scalars().all()))

    async def get_for_bucket(
        self, bucket_id: str, webhook_id: str
    ) -> WebhookSubscriptionResult | None:
        result = await self.db.execute(
            select(WebhookUrl).where(
                WebhookUrl.id == webhook_id, WebhookUrl.bucket_id == bucket_id
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return (await self._with_headers([row]))[0]

    async def create_subscription(
        self, data: WebhookSubscriptionCreate
    ) -> WebhookSubscriptionResult:
        row = await self.create(
            WebhookUrl(
                bucket_id=data.bucket_id,
                url=data.url,
                event_type=data.event_type,
                is_active=data.is_active,
            )
        )
        for name, value in sorted(data.headers.items()):
            await self.add_header(row.id, name, value)
        return (await self._with_headers([row]))[0]

    async def update_subscription(
        self, webhook_id: str, data: WebhookSubscriptionUpdate
    ) -> WebhookSubscriptionResult | None:
        row = await self.get_model_by_id(webhook_id)
        if row is None:
            return None
        if data.url is not None:
            row.url = data.url
        if data.event_type is not None:
            row.event_type = data.event_type
        if data.is_active is not None:
            row.is_active = data.is_active
        # Savepoint rollback expires row; keep what the conflict reports.
        details = {"bucket_id": row.bucket_id, "url": row.url, "event_type": row.event_type}
        try:
            async with self.db.begin_nested():
                await self.db.flush()
        except IntegrityError as exc:
            raise ConflictException(_DUPLICATE_SUBSCRIPTION, details) from exc
        await self.db.refresh(row)
        return (await self._with_headers([row]))[0]

    async def delete_subscription(self, webhook_id: str) -> bool:
        row = await self.get_model_by_id(webhook_id)
        if row is None:
            return False
        await self.db.execute(
            delete(WebhookHeader).where(WebhookHeader.webhook_url_id == webhook_id)
        )
        await self.delete(row)
        return True

    async def get_header(
        self, webhook_id: str, header_name: str
    ) -> WebhookHeaderResult | None:
        header = await self._get_header_model(webhook_id, header_name)
        return _header_to_result(header) if header else None

    async def _get_header_model(
        self, webhook_id: str, header_name: str
    ) -> WebhookHeader | None:
        result = await self.db.execute(
            select(WebhookHeader).where(
                WebhookHeader.webhook_url_id == webhook_id,
                WebhookHeader.header_name == header_name,
            )
        )
        return result.scalar_one_or_none()

    async def add_header(
        self, webhook_id: str, header_name: str, header_value: str
    ) -> WebhookHeaderResult:
        header = WebhookHeader(
            webhook_url_id=webhook_id,
            header_name=header_name,
            header_value=header_value,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(header)
                await self.db.flush()
        except IntegrityError as exc:
            raise ConflictException(
                f"Header already configured: {header_name}",
                {"webhook_id": webhook_id, "header_name": header_name},
            ) from exc
        await self.db.refresh(header)
        return _header_to_result(header)

    async def update_header_value(
        self, webhook_id: str, header_name: str, header_value: str
    ) -> WebhookHeaderResult | None:
        header = await self._get_header_model(webhook_id, header_name)
        if header is None:
            return None
        header.header_value = header_value
        await self.db.flush()
        await self.db.refresh(header)
        return _header_to_result(header)

    async def delete_header(self, webhook_id: str, header_name: str) -> bool:
        result = await self.db.execute(
            delete(WebhookHeader).where(
                WebhookHeader.webhook_url_id == webhook_id,
                WebhookHeader.header_name == header_name,
            )
        )
        return (result.rowcount or 0) > 0

    def _on_integrity_error(self, obj: WebhookUrl, exc: IntegrityError) -> DriveException:
        return ConflictException(
            _DUPLICATE_SUBSCRIPTION,
            {"bucket_id": obj.bucket_id, "url": obj.url, "event_type": obj.event_type},
        )
