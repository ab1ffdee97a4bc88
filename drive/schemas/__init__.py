"""API request/response schemas (pydantic)."""

from drive.schemas.health import HealthResponse
from drive.schemas.resource import ResourceResponse
from drive.schemas.webhook import (
    WebhookCreateRequest,
    WebhookHeaderCreateRequest,
    WebhookHeaderResponse,
    WebhookHeaderUpdateRequest,
    WebhookResponse,
    WebhookUpdateRequest,
)

__all__ = [
    "HealthResponse",
    "ResourceResponse",
    "WebhookCreateRequest",
    "WebhookHeaderCreateRequest",
    "WebhookHeaderResponse",
    "WebhookHeaderUpdateRequest",
    "WebhookResponse",
    "WebhookUpdateRequest",
]
