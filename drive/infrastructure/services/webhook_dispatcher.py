"""Webhook dispatcher: fire-and-forget delivery of resource events.

dispatch() never blocks the caller and never raises for delivery problems.
Each matching subscriber gets its own task with a single POST attempt; a
slow or failing subscriber does not delay or affect the others. Outcomes
are only logged.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from drive.application.dtos.notification import NotificationEvent
from drive.application.dtos.webhook import WebhookSubscriptionResult
from drive.application.interfaces.repositories import IWebhookRepository
from drive.infrastructure.exceptions import WebhookDeliveryError
from drive.infrastructure.persistence.repositories.webhook_repo import (
    WebhookRepository,
)
from drive.shared.telemetry.logging import get_logger
from drive.shared.telemetry.telemetry import get_tracer

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "Drive-Webhook/1.0"


def default_headers(event_type: str, user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Headers every delivery starts from."""
    return {
        "Content-Type": "application/json",
        "User-Agent": user_agent,
        "X-Webhook-Event": event_type,
    }


def merge_headers(*layers: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header layers left to right; a later layer replaces an earlier one.

    Names compare case-insensitively and keep the spelling of the layer
    that set the final value.
    """
    merged: dict[str, tuple[str, str]] = {}
    for layer in layers:
        for name, value in (layer or {}).items():
            merged[name.lower()] = (name, value)
    return dict(merged.values())


class WebhookDispatcher:
    """INotificationDispatcher backed by httpx and a task per delivery.

    Subscribers are resolved in a session of their own, so dispatch() can
    be called from request code without holding its transaction open.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        http_client: httpx.AsyncClient | None = None,
        *,
        timeout: float = 10.0,
        max_concurrency: int = 32,
        response_body_limit: int = 4096,
        user_agent: str = DEFAULT_USER_AGENT,
        shutdown_grace_seconds: float = 10.0,
        repository_factory: Callable[[AsyncSession], IWebhookRepository] = WebhookRepository,
    ) -> None:
        self._session_factory = session_factory
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient()
        self._timeout = timeout
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._response_body_limit = response_body_limit
        self._user_agent = user_agent
        self._shutdown_grace_seconds = shutdown_grace_seconds
        self._repository_factory = repository_factory
        self._tasks: set[asyncio.Task[None]] = set()
        self._closed = False
        self._tracer = get_tracer(__name__)

    @property
    def in_flight(self) -> int:
        """Number of fan-out and delivery tasks not finished yet."""
        return len(self._tasks)

    def dispatch(
        self,
        event: NotificationEvent,
        extra_headers: Mapping[str, str] | None = None,
    ) -> None:
        """Schedule notification of every active subscriber of event's bucket and type."""
        if self._closed:
            logger.warning(
                "Webhook dispatcher closed; dropping %s for resource %s",
                event.event_type,
                event.resource.id,
            )
            return
        self._spawn(
            self._fan_out(event, dict(extra_headers or {})),
            name=f"webhook-fanout:{event.event_type}:{event.resource.id}",
        )

    def _spawn(self, coro: Coroutine[Any, Any, None], name: str) -> None:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _fan_out(
        self, event: NotificationEvent, extra_headers: dict[str, str]
    ) -> None:
        try:
            async with self._session_factory() as session:
                repo = self._repository_factory(session)
                subscriptions = await repo.list_active_by_bucket_and_event_type(
                    event.bucket.id, event.event_type
                )
        except Exception:
            logger.exception(
                "Failed to resolve webhook subscribers for %s in bucket %s",
                event.event_type,
                event.bucket.id,
            )
            return

        if not subscriptions:
            logger.debug(
                "No active webhooks for %s in bucket %s",
                event.event_type,
                event.bucket.id,
            )
            return

        body = json.dumps(event.to_payload(), separators=(",", ":")).encode()
        base = default_headers(event.event_type, self._user_agent)
        for subscription in subscriptions:
            headers = merge_headers(base, subscription.header_map(), extra_headers)
            self._spawn(
                self._deliver(subscription, event, body, headers),
                name=f"webhook-deliver:{subscription.id}",
            )
        logger.info(
            "Dispatched %s for resource %s to %d webhook(s)",
            event.event_type,
            event.resource.id,
            len(subscriptions),
        )

    async def _deliver(
        self,
        subscription: WebhookSubscriptionResult,
        event: NotificationEvent,
        body: bytes,
        headers: dict[str, str],
    ) -> None:
        async with self._semaphore:
            with self._tracer.start_as_current_span("webhook.deliver") as span:
                span.set_attribute("webhook.id", subscription.id)
                span.set_attribute("webhook.event", event.event_type)
                span.set_attribute("drive.resource_id", event.resource.id)
                try:
                    status_code = await self._post(subscription.url, body, headers)
                except WebhookDeliveryError as e:
                    span.record_exception(e)
                    logger.warning(
                        "Webhook delivery failed: webhook=%s url=%s event=%s resource=%s reason=%s",
                        subscription.id,
                        subscription.url,
                        event.event_type,
                        event.resource.id,
                        e.details.get("reason"),
                    )
                    return
                except Exception:
                    logger.exception(
                        "Unexpected error delivering webhook %s", subscription.id
                    )
                    return
                span.set_attribute("http.status_code", status_code)

        if 200 <= status_code < 300:
            logger.info(
                "Webhook delivered: webhook=%s url=%s event=%s resource=%s status=%d",
                subscription.id,
                subscription.url,
                event.event_type,
                event.resource.id,
                status_code,
            )
        else:
            logger.warning(
                "Webhook rejected: webhook=%s url=%s event=%s resource=%s status=%d",
                subscription.id,
                subscription.url,
                event.event_type,
                event.resource.id,
                status_code,
            )

    async def _post(self, url: str, body: bytes, headers: dict[str, str]) -> int:
        """POST once and discard at most response_body_limit bytes of the reply."""
        try:
            async with self._http.stream(
                "POST", url, content=body, headers=headers, timeout=self._timeout
            ) as response:
                received = 0
                async for chunk in response.aiter_raw():
                    received += len(chunk)
                    if received >= self._response_body_limit:
                        break
                return response.status_code
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise WebhookDeliveryError(url, str(e) or type(e).__name__) from e

    async def wait_idle(self) -> None:
        """Wait until every scheduled fan-out and delivery has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self, grace_seconds: float | None = None) -> None:
        """Stop accepting events, let in-flight deliveries finish, then cancel stragglers."""
        self._closed = True
        grace = self._shutdown_grace_seconds if grace_seconds is None else grace_seconds
        try:
            await asyncio.wait_for(self.wait_idle(), timeout=grace)
        except TimeoutError:
            pending = list(self._tasks)
            logger.warning(
                "Cancelling %d webhook task(s) still running after %.1fs",
                len(pending),
                grace,
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        if self._owns_client:
            await self._http.aclose()
        logger.info("Webhook dispatcher closed")
