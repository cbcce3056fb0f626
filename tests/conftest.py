"""
Test fixtures for the Bank Cards API test suite.

This module provides shared fixtures used across all test files:

  - db_engine / session_factory / db_session: Fresh in-memory SQLite
    database for each test
  - client_factory / client: Async HTTP test clients (unauthenticated)
  - admin_user / card_holder / other_card_holder: Users inserted directly
    through the repository, the way an operator would provision them
  - admin_client / user_client / other_user_client: Clients logged in
    through the real login endpoint, each with its own JWT
  - issue_card: Helper that creates a card through the admin API

Key design decisions:
  - The secrets the application needs at import time are set in the
    environment before anything from bankcards is imported.
  - In-memory SQLite on a single shared connection (StaticPool) so every
    session in a test sees the same database, and nothing leaks between
    tests.
  - We override FastAPI's get_db dependency with the same unit-of-work
    rules as production, bound to the test engine.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-signing")
os.environ.setdefault("CARD_ENCRYPTION_PASSWORD", "test-card-encryption-password")
os.environ.setdefault("CARD_ENCRYPTION_SALT", "test-card-salt")
os.environ.setdefault("CARD_HASH_SECRET_KEY", "test-card-hash-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from contextlib import AsyncExitStack
from datetime import date, timedelta

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from bankcards.database import Base, get_db
from bankcards.exceptions import BankCardsError
from bankcards.main import app
from bankcards.models.user import Role, User
from bankcards.repositories import UserRepository
from bankcards.security import hash_password
from bankcards.validators.card_validator import utc_today


TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_PASSWORD = "AdminPass123"
USER_PASSWORD = "UserPass123"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client_factory(session_factory):
    """
    Build async HTTP test clients with the test database injected.

    Every client created by the factory talks to the same app and database;
    they are closed together when the test ends.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except BankCardsError:
                await session.commit()
                raise
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncExitStack() as stack:

        async def make_client(token: str | None = None) -> AsyncClient:
            ac = await stack.enter_async_context(
                AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
            )
            if token:
                ac.headers["Authorization"] = f"Bearer {token}"
            return ac

        yield make_client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(client_factory):
    return await client_factory()


async def _create_user(session_factory, username: str, password: str, role: Role) -> User:
    async with session_factory() as session:
        user = await UserRepository(session).save(
            User(username=username, hashed_password=hash_password(password), role=role)
        )
        await session.commit()
    return user


async def _login(client: AsyncClient, username: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/login",
        json={"username": username, "password": password},
    )
    assert response.status_code == 200, f"Login failed: {response.text}"
    return response.json()["token"]


@pytest_asyncio.fixture
async def admin_user(session_factory):
    return await _create_user(session_factory, "admin", ADMIN_PASSWORD, Role.ADMIN)


@pytest_asyncio.fixture
async def card_holder(session_factory):
    return await _create_user(session_factory, "alice", USER_PASSWORD, Role.USER)


@pytest_asyncio.fixture
async def other_card_holder(session_factory):
    return await _create_user(session_factory, "bob", USER_PASSWORD, Role.USER)


@pytest_asyncio.fixture
async def admin_client(client_factory, client, admin_user):
    """Test client logged in as an ADMIN."""
    token = await _login(client, admin_user.username, ADMIN_PASSWORD)
    return await client_factory(token)


@pytest_asyncio.fixture
async def user_client(client_factory, client, card_holder):
    """Test client logged in as the card holder "alice"."""
    token = await _login(client, card_holder.username, USER_PASSWORD)
    return await client_factory(token)


@pytest_asyncio.fixture
async def other_user_client(client_factory, client, other_card_holder):
    """A second card holder ("bob") for cross-user tests."""
    token = await _login(client, other_card_holder.username, USER_PASSWORD)
    return await client_factory(token)


@pytest_asyncio.fixture
async def issue_card(admin_client):
    """
    Return a helper that issues a card through POST /cards as the admin.

    Card numbers default to a fresh value per call so tests can issue
    several cards without tripping the duplicate check.
    """
    counter = iter(range(1000, 10000))

    async def _issue(
        owner: User,
        balance: str = "0.00",
        card_number: str | None = None,
        expiry_date: date | None = None,
    ) -> dict:
        number = card_number or f"4000 1234 5678 {next(counter)}"
        expiry = expiry_date or utc_today() + timedelta(days=365)
        response = await admin_client.post(
            "/api/v1/cards",
            json={
                "card_number": number,
                "owner_id": str(owner.id),
                "expiry_date": expiry.isoformat(),
                "initial_balance": balance,
            },
        )
        assert response.status_code == 201, f"Card issue failed: {response.text}"
        return response.json()

    return _issue
