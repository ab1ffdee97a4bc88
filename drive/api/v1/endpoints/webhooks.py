"""Webhook subscription API: thin routes delegating to WebhookSubscriptionService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from drive.api.v1.dependencies import (
    get_client_id,
    get_webhook_service,
    get_webhook_service_for_write,
)
from drive.application.use_cases.webhooks import WebhookSubscriptionService
from drive.core.limiter import limit_writes
from drive.schemas.webhook import (
    WebhookCreateRequest,
    WebhookHeaderCreateRequest,
    WebhookHeaderResponse,
    WebhookHeaderUpdateRequest,
    WebhookResponse,
    WebhookUpdateRequest,
)

router = APIRouter()


@router.post("/{bucket_id}/webhooks", response_model=WebhookResponse, status_code=201)
@limit_writes
async def create_webhook(
    request: Request,
    bucket_id: str,
    body: WebhookCreateRequest,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service_for_write)],
):
    """Register a URL for resource.new or resource.deleted events in the bucket."""
    created = await webhook_svc.create_subscription(
        bucket_id,
        client_id,
        url=body.url,
        event_type=body.event_type,
        is_active=body.is_active,
        headers=body.headers,
    )
    return WebhookResponse.from_result(created)


@router.get("/{bucket_id}/webhooks", response_model=list[WebhookResponse])
async def list_webhooks(
    bucket_id: str,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service)],
):
    """List the bucket's subscriptions with their headers."""
    subs = await webhook_svc.list_subscriptions(bucket_id, client_id)
    return [WebhookResponse.from_result(s) for s in subs]


@router.get("/{bucket_id}/webhooks/{webhook_id}", response_model=WebhookResponse)
async def get_webhook(
    bucket_id: str,
    webhook_id: str,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service)],
):
    sub = await webhook_svc.get_subscription(bucket_id, client_id, webhook_id)
    return WebhookResponse.from_result(sub)


@router.patch("/{bucket_id}/webhooks/{webhook_id}", response_model=WebhookResponse)
@limit_writes
async def update_webhook(
    request: Request,
    bucket_id: str,
    webhook_id: str,
    body: WebhookUpdateRequest,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service_for_write)],
):
    """Change URL, event type, or active flag."""
    updated = await webhook_svc.update_subscription(
        bucket_id,
        client_id,
        webhook_id,
        url=body.url,
        event_type=body.event_type,
        is_active=body.is_active,
    )
    return WebhookResponse.from_result(updated)


@router.delete("/{bucket_id}/webhooks/{webhook_id}", status_code=204)
@limit_writes
async def delete_webhook(
    request: Request,
    bucket_id: str,
    webhook_id: str,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service_for_write)],
) -> Response:
    await webhook_svc.delete_subscription(bucket_id, client_id, webhook_id)
    return Response(status_code=204)


@router.post(
    "/{bucket_id}/webhooks/{webhook_id}/headers",
    response_model=WebhookHeaderResponse,
    status_code=201,
)
@limit_writes
async def add_webhook_header(
    request: Request,
    bucket_id: str,
    webhook_id: str,
    body: WebhookHeaderCreateRequest,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service_for_write)],
):
    """Add a custom header; 409 if the subscription already has it."""
    header = await webhook_svc.add_header(
        bucket_id, client_id, webhook_id, body.name, body.value
    )
    return WebhookHeaderResponse.from_result(header)


@router.put(
    "/{bucket_id}/webhooks/{webhook_id}/headers/{header_name}",
    response_model=WebhookHeaderResponse,
)
@limit_writes
async def update_webhook_header(
    request: Request,
    bucket_id: str,
    webhook_id: str,
    header_name: str,
    body: WebhookHeaderUpdateRequest,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service_for_write)],
):
    header = await webhook_svc.update_header(
        bucket_id, client_id, webhook_id, header_name, body.value
    )
    return WebhookHeaderResponse.from_result(header)


@router.delete(
    "/{bucket_id}/webhooks/{webhook_id}/headers/{header_name}", status_code=204
)
@limit_writes
async def delete_webhook_header(
    request: Request,
    bucket_id: str,
    webhook_id: str,
    header_name: str,
    client_id: Annotated[str, Depends(get_client_id)],
    webhook_svc: Annotated[WebhookSubscriptionService, Depends(get_webhook_service_for_write)],
) -> Response:
    await webhook_svc.delete_header(bucket_id, client_id, webhook_id, header_name)
    return Response(status_code=204)
