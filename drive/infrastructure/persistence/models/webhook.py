"""Webhook subscription ORM models: target URLs per bucket/event and their custom headers."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from drive.infrastructure.persistence.database import Base
from drive.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)


class WebhookUrl(CuidMixin, TimestampMixin, Base):
    """Webhook subscription. Table: webhook_url. Unique per (bucket, url, event_type)."""

    __tablename__ = "webhook_url"

    bucket_id: Mapped[str] = mapped_column(
        String, ForeignKey("bucket.id", ondelete="CASCADE"), nullable=False, index=True
    )
    url: Mapped[str] = mapped_column(String, nullable=False)
    event_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )

    __table_args__ = (
        UniqueConstraint(
            "bucket_id", "url", "event_type", name="ux_webhook_url_bucket_url_event"
        ),
        CheckConstraint(
            "event_type IN ('resource.new', 'resource.deleted')",
            name="ck_webhook_url_event_type",
        ),
    )


class WebhookHeader(CuidMixin, CreatedAtMixin, Base):
    """Custom header sent with every delivery of a subscription. Table: webhook_header."""

    __tablename__ = "webhook_header"

    webhook_url_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("webhook_url.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    header_name: Mapped[str] = mapped_column(String, nullable=False)
    header_value: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "webhook_url_id", "header_name", name="ux_webhook_header_url_name"
        ),
    )
