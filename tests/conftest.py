"""
Test fixtures for the back-office test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - store: LedgerStore bound to db_session, for service-level tests
  - client: Async HTTP test client with get_db pointed at the test database
  - make_account / add_movement: factories for ledger rows (holders,
    accounts and movements are provisioned outside the API, so tests
    insert them directly)

Each test gets a completely fresh database, so no state leaks between tests.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from backoffice.database import Base, get_db
from backoffice.main import app
from backoffice.models import Account, AccountHolder, Movement, MovementKind
from backoffice.store import LedgerStore


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Provide an async session bound to the test engine."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def store(db_session):
    return LedgerStore(db_session)


@pytest_asyncio.fixture
async def client(db_engine):
    """
    Async HTTP test client with the test database injected.

    This overrides the get_db dependency so all requests hit the
    in-memory test database instead of the real one.
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_account(db_session):
    """
    Factory: create a holder and one account for them, committed.

    Pass `holder` to open a second account for an existing holder.
    """

    async def _make(
        balance: str = "0",
        first_name: str = "Ana",
        last_name: str = "García",
        city: str = "Bogotá",
        holder: AccountHolder | None = None,
    ) -> Account:
        if holder is None:
            holder = AccountHolder(first_name=first_name, last_name=last_name, city=city)
            db_session.add(holder)
            await db_session.flush()

        account = Account(holder_id=holder.id, balance=Decimal(balance))
        db_session.add(account)
        await db_session.commit()
        return account

    return _make


@pytest_asyncio.fixture
async def add_movement(db_session):
    """Factory: insert a movement with an explicit date, committed."""

    async def _add(
        account: Account,
        kind: MovementKind,
        amount: str,
        date: datetime,
    ) -> Movement:
        if date.tzinfo is None:
            date = date.replace(tzinfo=timezone.utc)
        movement = Movement(
            account_id=account.id,
            kind=kind,
            amount=Decimal(amount),
            date=date,
        )
        db_session.add(movement)
        await db_session.commit()
        return movement

    return _add
