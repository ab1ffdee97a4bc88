"""Webhook subscription validation and WebhookSubscriptionService with mocked repos."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from drive.application.dtos.bucket import BucketResult
from drive.application.dtos.webhook import (
    WebhookSubscriptionCreate,
    WebhookSubscriptionResult,
    WebhookSubscriptionUpdate,
)
from drive.application.use_cases.webhooks import WebhookSubscriptionService
from drive.application.use_cases.webhooks.webhook_operations import (
    validate_event_type,
    validate_header,
    validate_webhook_url,
)
from drive.domain.exceptions import ResourceNotFoundException, ValidationException

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestValidateWebhookUrl:
    def test_http_and_https(self) -> None:
        assert validate_webhook_url(" https://hooks.example.com/x ") == "https://hooks.example.com/x"
        assert validate_webhook_url("http://10.0.0.5:8080/cb") == "http://10.0.0.5:8080/cb"

    @pytest.mark.parametrize("url", ["", "ftp://host/x", "hooks.example.com", "http:///nohost"])
    def test_rejected(self, url: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            validate_webhook_url(url)
        assert exc_info.value.details == {"field": "url"}


class TestValidateEventType:
    def test_known(self) -> None:
        assert validate_event_type("resource.new") == "resource.new"
        assert validate_event_type("resource.deleted") == "resource.deleted"

    def test_unknown(self) -> None:
        with pytest.raises(ValidationException, match="resource.new"):
            validate_event_type("resource.updated")


class TestValidateHeader:
    def test_valid(self) -> None:
        assert validate_header(" X-Api-Key ", "secret") == ("X-Api-Key", "secret")

    def test_bad_name(self) -> None:
        with pytest.raises(ValidationException):
            validate_header("Bad Name", "v")
        with pytest.raises(ValidationException):
            validate_header("", "v")

    def test_line_break_in_value(self) -> None:
        with pytest.raises(ValidationException):
            validate_header("X-Ok", "a\r\nInjected: 1")


def _sub(sub_id: str = "w1") -> WebhookSubscriptionResult:
    return WebhookSubscriptionResult(
        id=sub_id,
        bucket_id="b1",
        url="https://hooks.example.com/x",
        event_type="resource.new",
        is_active=True,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.fixture
def service():
    webhook_repo = AsyncMock()
    webhook_repo.create_subscription = AsyncMock(return_value=_sub())
    webhook_repo.get_for_bucket = AsyncMock(return_value=_sub())
    webhook_repo.update_subscription = AsyncMock(return_value=_sub())
    webhook_repo.update_header_value = AsyncMock(return_value=None)
    webhook_repo.delete_header = AsyncMock(return_value=False)
    bucket_repo = AsyncMock()
    bucket_repo.get_by_id = AsyncMock(
        return_value=BucketResult(
            id="b1", name="photos", client_id="c1", is_public=False, created_at=NOW, updated_at=NOW
        )
    )
    return WebhookSubscriptionService(webhook_repo, bucket_repo), webhook_repo, bucket_repo


class TestWebhookSubscriptionService:
    async def test_create_validates_and_passes_headers(self, service) -> None:
        svc, webhook_repo, _ = service
        await svc.create_subscription(
            "b1", "c1", " https://hooks.example.com/x", "resource.new", headers={"X-Key": "k"}
        )
        data: WebhookSubscriptionCreate = webhook_repo.create_subscription.call_args.args[0]
        assert data.url == "https://hooks.example.com/x"
        assert data.headers == {"X-Key": "k"}
        assert data.is_active is True

    async def test_create_rejects_bad_event(self, service) -> None:
        svc, webhook_repo, _ = service
        with pytest.raises(ValidationException):
            await svc.create_subscription("b1", "c1", "https://h.example.com", "nope")
        webhook_repo.create_subscription.assert_not_called()

    async def test_foreign_bucket_not_found(self, service) -> None:
        svc, webhook_repo, _ = service
        with pytest.raises(ResourceNotFoundException):
            await svc.list_subscriptions("b1", "other-client")
        webhook_repo.list_by_bucket.assert_not_called()

    async def test_webhook_of_other_bucket_not_found(self, service) -> None:
        svc, webhook_repo, _ = service
        webhook_repo.get_for_bucket.return_value = None
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await svc.get_subscription("b1", "c1", "w9")
        assert exc_info.value.details["resource_type"] == "webhook"

    async def test_partial_update(self, service) -> None:
        svc, webhook_repo, _ = service
        await svc.update_subscription("b1", "c1", "w1", is_active=False)
        webhook_repo.update_subscription.assert_awaited_once_with(
            "w1", WebhookSubscriptionUpdate(url=None, event_type=None, is_active=False)
        )

    async def test_update_missing_header(self, service) -> None:
        svc, *_ = service
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await svc.update_header("b1", "c1", "w1", "X-Missing", "v")
        assert exc_info.value.details["resource_type"] == "webhook_header"

    async def test_delete_missing_header(self, service) -> None:
        svc, *_ = service
        with pytest.raises(ResourceNotFoundException):
            await svc.delete_header("b1", "c1", "w1", "X-Missing")
