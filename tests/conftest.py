"""Pytest fixtures for labour ledger tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from labour_ledger.api.app import create_app
from labour_ledger.api.dependencies import get_db_session
from labour_ledger.calculators.types import AttendanceStatus, EntryKind
from labour_ledger.models import Base, Worker
from labour_ledger.services.worker_service import WorkerService

# In-memory SQLite shared by every connection of a single test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Create a fresh test database engine per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def make_worker(session: AsyncSession, owner_id: UUID):
    """Factory creating workers with unique phone numbers."""
    counter = {"n": 0}

    async def _make(
        name: str = "Ramesh",
        opening_balance: Decimal | int | str = Decimal("0"),
        category: str = "Construction",
        subcategory: str = "Mason",
        phone: str | None = None,
        owner: UUID | None = None,
    ) -> Worker:
        counter["n"] += 1
        return await WorkerService(session).create_worker(
            owner or owner_id,
            name=name,
            phone=phone or f"98765{counter['n']:05d}",
            category=category,
            subcategory=subcategory,
            opening_balance=opening_balance,
        )

    return _make


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client bound to the test database."""
    app = create_app()

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def headers(owner_id: UUID) -> dict[str, str]:
    return {"X-Owner-ID": str(owner_id)}


# ============================================================================
# Plain event stand-ins for calculator tests
# ============================================================================


@dataclass
class FakeWorker:
    current_balance: Decimal
    worker_id: UUID | None = None
    name: str = "Worker"
    phone: str = "9876543210"
    category: str = "Construction"
    subcategory: str = "Mason"
    opening_balance: Decimal = Decimal("0")


@dataclass
class FakeEntry:
    kind: EntryKind
    entry_date: date
    amount: Decimal
    sequence: int
    balance_after: Decimal = Decimal("0")
    status: str | None = None
    worker_id: UUID | None = None
    note: str | None = None


@pytest.fixture
def make_attendance():
    """Factory for in-memory attendance events."""

    def _make(
        day: date,
        amount: Any,
        sequence: int,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        **kwargs: Any,
    ) -> FakeEntry:
        return FakeEntry(
            kind=EntryKind.ATTENDANCE,
            entry_date=day,
            amount=Decimal(str(amount)),
            sequence=sequence,
            status=status.value,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_payment():
    """Factory for in-memory payments."""

    def _make(day: date, amount: Any, sequence: int, **kwargs: Any) -> FakeEntry:
        return FakeEntry(
            kind=EntryKind.PAYMENT,
            entry_date=day,
            amount=Decimal(str(amount)),
            sequence=sequence,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_fake_worker():
    def _make(balance: Any, **kwargs: Any) -> FakeWorker:
        return FakeWorker(current_balance=Decimal(str(balance)), **kwargs)

    return _make
