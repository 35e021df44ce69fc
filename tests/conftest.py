"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own engine on an in-memory SQLite database
   (StaticPool keeps the one connection alive for the whole test).
2. Tables are created from the ORM metadata, so no migrations run.
3. The app's get_db dependency is overridden to hand out sessions bound
   to that engine. Auth is NOT overridden: every request goes through
   the real bearer-token gate.
"""

import os

# Cheap bcrypt for speed; set before fitgoals.config is imported.
os.environ.setdefault("FITGOALS_BCRYPT_ROUNDS", "4")

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fitgoals.db.engine import get_db
from fitgoals.db.models import Base
from fitgoals.main import app

TEST_DB_URL = "sqlite+aiosqlite://"

PASSWORD = "password123"


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db_session(session_factory):
    """Direct session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture()
async def client(session_factory):
    """HTTP client with the app's get_db overridden for testing."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def login_as(client):
    """Factory: sign up + log in a fresh user, return auth headers.

    Usage: `headers = await login_as("ann")`. The username gets a random
    suffix unless exact=True.
    """

    async def _login(username: str = "user", exact: bool = False) -> dict:
        name = username if exact else f"{username}{uuid.uuid4().hex[:6]}"
        r = await client.post(
            "/auth/signup",
            json={"username": name, "email": f"{name}@example.com", "password": PASSWORD},
        )
        assert r.status_code == 201, r.text
        r = await client.post("/auth/login", json={"username": name, "password": PASSWORD})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _login

