"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (schema, content
store, webhook dispatcher, telemetry, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from drive.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: database schema (if auto-create), content store,
    webhook HTTP client and dispatcher, telemetry (if enabled). Shutdown
    order: dispatcher drain, HTTP client close, telemetry shutdown, SQL
    engine dispose.
    """
    from drive.infrastructure.external.storage import StorageFactory
    from drive.infrastructure.persistence import database
    from drive.infrastructure.services.webhook_dispatcher import WebhookDispatcher

    settings = get_settings()

    # ---- Startup ----
    if settings.database_auto_create:
        await database.init_models()

    app.state.content_store = StorageFactory.create_content_store(settings)

    # Shared HTTP client for webhook deliveries (connection reuse).
    app.state.webhook_http_client = httpx.AsyncClient(
        timeout=settings.webhook_timeout_seconds,
        follow_redirects=False,
    )
    app.state.dispatcher = WebhookDispatcher(
        database.get_session_factory(),
        app.state.webhook_http_client,
        timeout=settings.webhook_timeout_seconds,
        max_concurrency=settings.webhook_max_concurrency,
        response_body_limit=settings.webhook_response_body_limit,
        user_agent=settings.webhook_user_agent,
        shutdown_grace_seconds=settings.webhook_shutdown_grace_seconds,
    )

    if settings.telemetry_enabled:
        from drive.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.start(app, database.get_engine())
        set_telemetry(telemetry)

    yield

    # ---- Shutdown ----
    dispatcher = getattr(app.state, "dispatcher", None)
    if dispatcher is not None:
        await dispatcher.aclose()
        app.state.dispatcher = None

    if getattr(app.state, "webhook_http_client", None) is not None:
        await app.state.webhook_http_client.aclose()
        app.state.webhook_http_client = None
        logger.info("Webhook HTTP client closed")

    from drive.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    await database.dispose_engine()
