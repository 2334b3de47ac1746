"""
Test fixtures for the ledger test suite.

This module provides shared fixtures used across all test files:

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - products: The demo product catalog inserted into that database
  - client: Async HTTP test client (no token)
  - authenticated_client: Test client carrying a bearer token for owner "1"
  - second_authenticated_client: A separate client for owner "2"
  - make_token: Build a token the way the identity service would

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) is used for speed and isolation.
    Each test gets a completely fresh database — no state leaks between tests.
  - We override FastAPI's get_db dependency to inject sessions bound to the
    test engine, so the application code works exactly as in production.
  - Tokens are signed with the test SECRET_KEY below; the ledger only
    verifies them, so issuing them here stands in for the identity service.
"""

import os

# Settings are read at import time; the signing secret has no default.
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-ledger-tests")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import datetime, timedelta, timezone  # noqa: E402
from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker  # noqa: E402

import bank_ledger.models  # noqa: E402,F401
from bank_ledger.config import settings  # noqa: E402
from bank_ledger.database import Base, get_db  # noqa: E402
from bank_ledger.main import app  # noqa: E402
from bank_ledger.models.product import Product, ProductType  # noqa: E402


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


def _make_token(owner_id: str, expires_in: timedelta = timedelta(minutes=30), **claims) -> str:
    payload = {"sub": owner_id, "exp": datetime.now(timezone.utc) + expires_in, **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


@pytest.fixture
def make_token():
    """Factory for signed bearer tokens: make_token("1") -> "eyJ..."."""
    return _make_token


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
async def products(db_engine):
    """
    Seed the product catalog and return the products keyed by short name:
    savings (2.5%), fixed (3.8%, 12 months), regular (4.2%, 24 months),
    inactive (discontinued).
    """
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False,
    )
    catalog = {
        "savings": Product(
            name="Free Savings",
            product_type=ProductType.SAVINGS,
            interest_rate=Decimal("2.5"),
            min_amount=1_000,
        ),
        "fixed": Product(
            name="12M Fixed Deposit",
            product_type=ProductType.FIXED_DEPOSIT,
            interest_rate=Decimal("3.8"),
            min_amount=1_000_000,
            max_amount=100_000_000,
            duration_months=12,
        ),
        "regular": Product(
            name="24M Regular Deposit",
            product_type=ProductType.REGULAR_DEPOSIT,
            interest_rate=Decimal("4.2"),
            min_amount=10_000,
            max_amount=1_000_000,
            duration_months=24,
        ),
        "inactive": Product(
            name="Legacy Savings",
            product_type=ProductType.SAVINGS,
            interest_rate=Decimal("1.0"),
            is_active=False,
        ),
    }
    async with async_session() as session:
        session.add_all(catalog.values())
        await session.commit()
    return catalog


@pytest_asyncio.fixture
async def client(db_engine, products):
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
async def authenticated_client(client):
    """Test client with a bearer token for owner "1"."""
    client.headers["Authorization"] = f"Bearer {_make_token('1')}"
    return client


@pytest_asyncio.fixture
async def second_authenticated_client(db_engine, authenticated_client):
    """
    A second client, for owner "2", sharing the same database.

    Use this alongside authenticated_client to verify that owner 1
    cannot reach owner 2's accounts and vice versa.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {_make_token('2')}"},
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def account(authenticated_client, products):
    """An open SAVINGS account for owner "1", as returned by the API."""
    response = await authenticated_client.post(
        "/accounts", json={"product_id": products["savings"].id},
    )
    assert response.status_code == 201, f"Open account failed: {response.text}"
    return response.json()
