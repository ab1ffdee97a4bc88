"""Webhook subscription API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from drive.application.dtos.webhook import (
    WebhookHeaderResult,
    WebhookSubscriptionResult,
)


class WebhookCreateRequest(BaseModel):
    """Request body for POST /buckets/{bucket_id}/webhooks."""

    url: str = Field(..., description="http(s) endpoint receiving the POST")
    event_type: str = Field(..., description="resource.new or resource.deleted")
    is_active: bool = True
    headers: dict[str, str] = Field(
        default_factory=dict, description="Custom headers sent with every delivery"
    )


class WebhookUpdateRequest(BaseModel):
    """Request body for PATCH /buckets/{bucket_id}/webhooks/{webhook_id}. Omitted fields are unchanged."""

    url: str | None = None
    event_type: str | None = None
    is_active: bool | None = None


class WebhookHeaderCreateRequest(BaseModel):
    """Request body for POST .../webhooks/{webhook_id}/headers."""

    name: str = Field(..., min_length=1)
    value: str


class WebhookHeaderUpdateRequest(BaseModel):
    """Request body for PUT .../webhooks/{webhook_id}/headers/{header_name}."""

    value: str


class WebhookHeaderResponse(BaseModel):
    name: str
    value: str
    created_at: datetime

    @classmethod
    def from_result(cls, header: WebhookHeaderResult) -> "WebhookHeaderResponse":
        return cls(
            name=header.header_name,
            value=header.header_value,
            created_at=header.created_at,
        )


class WebhookResponse(BaseModel):
    """A webhook subscription with its custom headers."""

    id: str
    bucket_id: str
    url: str
    event_type: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    headers: list[WebhookHeaderResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, sub: WebhookSubscriptionResult) -> "WebhookResponse":
        return cls(
            id=sub.id,
            bucket_id=sub.bucket_id,
            url=sub.url,
            event_type=sub.event_type,
            is_active=sub.is_active,
            created_at=sub.created_at,
            updated_at=sub.updated_at,
            headers=[WebhookHeaderResponse.from_result(h) for h in sub.headers],
        )
