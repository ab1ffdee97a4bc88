"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

SQLite (aiosqlite) is the default backend; PostgreSQL (asyncpg) is used when
DATABASE_URL points at it. Tables are created by init_models() at startup
when database_auto_create is set.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional / get_session_factory) so import does not trigger
Settings validation.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from drive.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None

# Execution option marking a connection whose transaction will write.
WRITE_LOCK = "drive_write_lock"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _configure_sqlite(sync_engine: Any) -> None:
    """Enable foreign keys and WAL, and take over BEGIN so SAVEPOINT works with aiosqlite.

    Connections opened with the WRITE_LOCK option start with BEGIN IMMEDIATE:
    the write lock is taken up front, so a second writer waits on the busy
    timeout instead of failing with "database is locked" on lock upgrade.
    """

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        if conn.get_execution_options().get(WRITE_LOCK):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    url = settings.database_url
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if _is_sqlite(url):
        kwargs["connect_args"] = {"timeout": 30}
    else:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size if settings.db_pool_size is not None else 20,
            max_overflow=(
                settings.db_max_overflow if settings.db_max_overflow is not None else 30
            ),
            pool_recycle=3600,
        )
    engine = create_async_engine(url, **kwargs)
    if _is_sqlite(url):
        _configure_sqlite(engine.sync_engine)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it if needed."""
    _ensure_engine()
    assert engine is not None
    return engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory (used outside request scope, e.g. webhook dispatch)."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


async def init_models() -> None:
    """Create all tables that do not exist yet."""
    from drive.infrastructure.persistence import models  # noqa: F401  (register tables)

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured")


async def dispose_engine() -> None:
    """Dispose the engine and forget it (next use re-reads settings)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


async def begin_write(session: AsyncSession) -> None:
    """Start a write transaction on session, ending any open read transaction first.

    On SQLite this issues BEGIN IMMEDIATE; other backends ignore the option.
    """
    if session.in_transaction():
        await session.commit()
    await session.connection(execution_options={WRITE_LOCK: True})


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    async with get_session_factory()() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Begins a write transaction, commits on success, rolls back on exception.
    Use for POST, PUT, PATCH, DELETE endpoints that need no work after commit;
    resource upload and delete commit through SqlAlchemyUnitOfWork instead.
    """
    async with get_session_factory()() as session:
        async with session.begin():
            await session.connection(execution_options={WRITE_LOCK: True})
            yield session
