"""WebhookDispatcher: payload, header layering, isolation, bounded reads, no retry."""

import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
import pytest

from drive.application.dtos.bucket import BucketResult
from drive.application.dtos.notification import NotificationEvent
from drive.application.dtos.resource import ResourceResult
from drive.application.dtos.webhook import WebhookHeaderResult, WebhookSubscriptionResult
from drive.infrastructure.services.webhook_dispatcher import (
    WebhookDispatcher,
    default_headers,
    merge_headers,
)

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
DIGEST = "5f" * 32

BUCKET = BucketResult(
    id="b1", name="photos", client_id="c1", is_public=False, created_at=NOW, updated_at=NOW
)
RESOURCE = ResourceResult(
    id="r1",
    bucket_id="b1",
    hash=DIGEST,
    size=1024,
    content_type="application/octet-stream",
    extension=".bin",
    created_at=NOW,
)


def _event(event_type: str = "resource.new") -> NotificationEvent:
    return NotificationEvent(
        event_type=event_type,
        occurred_at=NOW,
        bucket=BUCKET,
        resource=RESOURCE,
        resource_url=f"/api/v1/resources/b1/{DIGEST}.bin",
    )


def _subscription(
    sub_id: str, url: str, headers: dict[str, str] | None = None
) -> WebhookSubscriptionResult:
    return WebhookSubscriptionResult(
        id=sub_id,
        bucket_id="b1",
        url=url,
        event_type="resource.new",
        is_active=True,
        created_at=NOW,
        updated_at=NOW,
        headers=tuple(
            WebhookHeaderResult(
                id=f"h-{name}",
                webhook_url_id=sub_id,
                header_name=name,
                header_value=value,
                created_at=NOW,
            )
            for name, value in sorted((headers or {}).items())
        ),
    )


@asynccontextmanager
async def _no_session():
    yield None


class FakeWebhookRepository:
    def __init__(self, subscriptions=None, error: Exception | None = None) -> None:
        self.subscriptions = subscriptions or []
        self.error = error
        self.queries: list[tuple[str, str]] = []

    def __call__(self, session):
        return self

    async def list_active_by_bucket_and_event_type(self, bucket_id: str, event_type: str):
        self.queries.append((bucket_id, event_type))
        if self.error:
            raise self.error
        return [s for s in self.subscriptions if s.event_type == event_type]


class EndlessBody(httpx.AsyncByteStream):
    """Response body that never ends; counts the chunks handed out."""

    def __init__(self, chunk_size: int = 1024) -> None:
        self.chunk_size = chunk_size
        self.chunks_read = 0

    async def __aiter__(self):
        while True:
            self.chunks_read += 1
            yield b"x" * self.chunk_size


def _dispatcher(repo: FakeWebhookRepository, handler, **kwargs) -> tuple[WebhookDispatcher, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return (
        WebhookDispatcher(_no_session, client, repository_factory=repo, **kwargs),
        client,
    )


class TestMergeHeaders:
    def test_later_layer_wins_case_insensitively(self) -> None:
        merged = merge_headers(
            {"User-Agent": "a", "X-One": "1"},
            {"user-agent": "b"},
            {"X-Two": "2"},
        )
        assert merged == {"user-agent": "b", "X-One": "1", "X-Two": "2"}

    def test_none_layers_ignored(self) -> None:
        assert merge_headers(None, {"A": "1"}, None) == {"A": "1"}

    def test_defaults(self) -> None:
        assert default_headers("resource.deleted", "UA/1") == {
            "Content-Type": "application/json",
            "User-Agent": "UA/1",
            "X-Webhook-Event": "resource.deleted",
        }


class TestDelivery:
    async def test_payload_and_default_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        repo = FakeWebhookRepository([_subscription("w1", "http://hook.test/a")])
        dispatcher, client = _dispatcher(repo, handler, user_agent="Drive-Test/1")
        dispatcher.dispatch(_event())
        await dispatcher.wait_idle()
        await client.aclose()

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "http://hook.test/a"
        assert request.headers["content-type"] == "application/json"
        assert request.headers["user-agent"] == "Drive-Test/1"
        assert request.headers["x-webhook-event"] == "resource.new"
        assert json.loads(request.content) == {
            "event": "resource.new",
            "timestamp": "2025-01-15T12:00:00Z",
            "bucket_id": "b1",
            "bucket_name": "photos",
            "resource_id": "r1",
            "resource_url": f"/api/v1/resources/b1/{DIGEST}.bin",
            "resource": {
                "hash": DIGEST,
                "size": 1024,
                "content_type": "application/octet-stream",
                "extension": ".bin",
            },
        }
        assert repo.queries == [("b1", "resource.new")]

    async def test_header_precedence(self) -> None:
        """defaults < subscription headers < caller headers."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        sub = _subscription(
            "w1",
            "http://hook.test/a",
            {"User-Agent": "from-subscription", "X-Token": "sub-token", "X-Sub-Only": "s"},
        )
        dispatcher, client = _dispatcher(FakeWebhookRepository([sub]), handler)
        dispatcher.dispatch(_event(), {"x-token": "caller-token", "X-Caller": "c"})
        await dispatcher.wait_idle()
        await client.aclose()

        headers = seen[0].headers
        assert headers["user-agent"] == "from-subscription"
        assert headers["x-token"] == "caller-token"
        assert headers["x-sub-only"] == "s"
        assert headers["x-caller"] == "c"
        assert headers["content-type"] == "application/json"

    async def test_failing_subscriber_does_not_affect_others(self, caplog) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "down.test":
                raise httpx.ConnectError("connection refused", request=request)
            seen.append(request.url.host)
            return httpx.Response(200)

        repo = FakeWebhookRepository(
            [
                _subscription("w1", "http://down.test/a"),
                _subscription("w2", "http://up.test/b"),
            ]
        )
        dispatcher, client = _dispatcher(repo, handler)
        with caplog.at_level(logging.INFO):
            dispatcher.dispatch(_event())
            await dispatcher.wait_idle()
        await client.aclose()

        assert seen == ["up.test"]
        assert "Webhook delivery failed" in caplog.text
        assert "connection refused" in caplog.text
        assert "Webhook delivered" in caplog.text

    async def test_timeout_is_logged_not_raised(self, caplog) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        dispatcher, client = _dispatcher(
            FakeWebhookRepository([_subscription("w1", "http://slow.test/")]), handler
        )
        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(_event())
            await dispatcher.wait_idle()
        await client.aclose()
        assert "timed out" in caplog.text

    async def test_non_2xx_is_not_retried(self, caplog) -> None:
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            return httpx.Response(500, text="boom")

        dispatcher, client = _dispatcher(
            FakeWebhookRepository([_subscription("w1", "http://hook.test/")]), handler
        )
        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(_event())
            await dispatcher.wait_idle()
        await client.aclose()

        assert attempts == 1
        assert "Webhook rejected" in caplog.text
        assert "status=500" in caplog.text

    async def test_response_body_read_is_bounded(self) -> None:
        body = EndlessBody(chunk_size=1024)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, stream=body)

        dispatcher, client = _dispatcher(
            FakeWebhookRepository([_subscription("w1", "http://hook.test/")]), handler
        )
        dispatcher.dispatch(_event())
        await dispatcher.wait_idle()
        await client.aclose()
        assert body.chunks_read == 4

    async def test_no_subscribers_no_requests(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        repo = FakeWebhookRepository([_subscription("w1", "http://hook.test/")])
        dispatcher, client = _dispatcher(repo, handler)
        dispatcher.dispatch(_event("resource.deleted"))
        await dispatcher.wait_idle()
        await client.aclose()
        assert seen == []
        assert repo.queries == [("b1", "resource.deleted")]

    async def test_subscriber_lookup_failure_is_logged(self, caplog) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        dispatcher, client = _dispatcher(
            FakeWebhookRepository(error=RuntimeError("db gone")), handler
        )
        with caplog.at_level(logging.ERROR):
            dispatcher.dispatch(_event())
            await dispatcher.wait_idle()
        await client.aclose()
        assert "Failed to resolve webhook subscribers" in caplog.text


class TestLifecycle:
    async def test_dispatch_after_close_is_dropped(self, caplog) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        dispatcher, client = _dispatcher(
            FakeWebhookRepository([_subscription("w1", "http://hook.test/")]), handler
        )
        await dispatcher.aclose()
        with caplog.at_level(logging.WARNING):
            dispatcher.dispatch(_event())
        assert dispatcher.in_flight == 0
        assert seen == []
        assert "dropping resource.new" in caplog.text
        assert not client.is_closed
        await client.aclose()

    async def test_close_waits_for_in_flight(self) -> None:
        seen: list[httpx.Request] = []

        async def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        dispatcher, client = _dispatcher(
            FakeWebhookRepository([_subscription("w1", "http://hook.test/")]), handler
        )
        dispatcher.dispatch(_event())
        assert dispatcher.in_flight == 1
        await dispatcher.aclose(grace_seconds=5)
        assert dispatcher.in_flight == 0
        assert len(seen) == 1
        await client.aclose()

    async def test_owned_client_closed(self) -> None:
        dispatcher = WebhookDispatcher(_no_session, repository_factory=FakeWebhookRepository())
        await dispatcher.aclose()
        assert dispatcher._http.is_closed

    @pytest.mark.parametrize("grace", [0.05])
    async def test_stragglers_cancelled_after_grace(self, grace: float) -> None:
        import asyncio

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(10)
            return httpx.Response(200)

        dispatcher, client = _dispatcher(
            FakeWebhookRepository([_subscription("w1", "http://hook.test/")]), handler
        )
        dispatcher.dispatch(_event())
        await dispatcher.aclose(grace_seconds=grace)
        assert dispatcher.in_flight == 0
        await client.aclose()
