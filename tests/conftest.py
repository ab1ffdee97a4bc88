"""Pytest configuration and fixtures for drive.

Every test gets its own SQLite database and storage root under tmp_path.
HTTP tests run the real app (lifespan included) over ASGITransport;
webhook deliveries go to an httpx.MockTransport instead of the network.
"""

import os
import tempfile
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field

# drive.main builds the app at import time; give it valid settings first.
_BOOT_DIR = tempfile.mkdtemp(prefix="drive-tests-")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-drive")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_BOOT_DIR}/boot.db")
os.environ.setdefault("STORAGE_ROOT", os.path.join(_BOOT_DIR, "storage"))
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from drive.application.dtos.bucket import BucketResult
from drive.core.config import get_settings
from drive.infrastructure.persistence import database
from drive.infrastructure.persistence.repositories import BucketRepository
from drive.infrastructure.security.jwt import create_access_token
from drive.infrastructure.services.webhook_dispatcher import WebhookDispatcher


@pytest.fixture(autouse=True)
async def env(tmp_path, monkeypatch) -> AsyncIterator[None]:
    """Point database and storage at tmp_path; reset cached settings and engine after the test."""
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-for-drive")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path}/drive.db")
    monkeypatch.setenv("STORAGE_ROOT", str(tmp_path / "storage"))
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    monkeypatch.setenv("PUBLIC_BASE_URL", "")
    get_settings.cache_clear()
    await database.dispose_engine()
    yield
    await database.dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
async def db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory over a freshly created schema."""
    await database.init_models()
    return database.get_session_factory()


@pytest.fixture
async def db_session(db_session_factory) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Rolls back after the test."""
    async with db_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def app() -> AsyncIterator[FastAPI]:
    """The application with its lifespan running (schema, content store, dispatcher)."""
    from drive.main import create_app

    application = create_app()
    async with application.router.lifespan_context(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_bucket() -> Callable:
    """Create a bucket directly in the database (the API does not provision buckets)."""

    async def _make(
        name: str = "photos", client_id: str = "client-a", *, is_public: bool = False
    ) -> BucketResult:
        factory = database.get_session_factory()
        async with factory() as session, session.begin():
            return await BucketRepository(session).create_bucket(
                name, client_id, is_public=is_public
            )

    return _make


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Bearer headers for a client id."""

    def _headers(client_id: str = "client-a") -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(client_id)}"}

    return _headers


@dataclass
class WebhookRecorder:
    """Collects requests the dispatcher sends; responds with status_code."""

    status_code: int = 200
    requests: list[httpx.Request] = field(default_factory=list)
    dispatcher: WebhookDispatcher | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text="ok")

    async def wait(self) -> None:
        assert self.dispatcher is not None
        await self.dispatcher.wait_idle()


@pytest.fixture
async def webhook_recorder(app: FastAPI) -> AsyncIterator[WebhookRecorder]:
    """Swap the app's dispatcher for one whose HTTP client never leaves the process."""
    recorder = WebhookRecorder()
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder.handler))
    recorder.dispatcher = WebhookDispatcher(
        database.get_session_factory(),
        http_client,
        timeout=5.0,
    )
    app.state.dispatcher = recorder.dispatcher
    yield recorder
    await recorder.dispatcher.wait_idle()
    await http_client.aclose()
