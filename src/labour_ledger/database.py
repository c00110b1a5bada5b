"""Database connection and session management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncGenerator
from uuid import UUID

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from labour_ledger.config import get_settings
from labour_ledger.models import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


def get_engine(database_url: str | None = None) -> AsyncEngine:
    """Create async database engine."""
    settings = get_settings()
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=False)
        use_immediate_transactions(engine)
        return engine
    return create_async_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


def use_immediate_transactions(engine: AsyncEngine) -> None:
    """Open every SQLite transaction with ``BEGIN IMMEDIATE``.

    pysqlite otherwise defers ``BEGIN`` until the first write, so a balance
    read before that write is not protected. With ``BEGIN IMMEDIATE`` the
    database write lock is held from the first statement until commit, and
    a second writer waits for it.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


# Global engine and session factory
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db() -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Initialize database engine and session factory."""
    global _engine, _session_factory
    if _engine is None:
        _engine = get_engine()
        _session_factory = async_sessionmaker(
            _engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _engine, _session_factory


async def create_schema(engine: AsyncEngine) -> None:
    """Create all ledger tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_db() -> None:
    """Dispose the global engine."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


def async_session_factory() -> AsyncSession:
    """Open a new session from the global factory."""
    _, factory = init_db()
    return factory()


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session that commits on success."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def acquire_worker_lock(session: AsyncSession, worker_id: UUID) -> None:
    """Serialize writers of one worker until the current transaction ends.

    On PostgreSQL this takes a transaction-scoped advisory lock keyed by the
    worker, released automatically on commit or rollback. SQLite engines
    built by ``get_engine`` already hold the database write lock from
    ``BEGIN IMMEDIATE``; the worker's version column rejects anything that
    still slips through.
    """
    conn = await session.connection()
    if conn.dialect.name == "postgresql":
        await session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:worker_id))"),
            {"worker_id": str(worker_id)},
        )
