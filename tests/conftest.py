"""Shared test fixtures.

Tests run against an in-memory SQLite database created from the ORM
metadata. The app's session dependency is overridden to use it, and no
Redis client is attached, so rate limiting and leaderboard caching are off
unless a test installs a mock.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

os.environ.setdefault("DOTLIFE_LOG_FORMAT", "console")
os.environ.setdefault("DOTLIFE_REDIS_URL", "")
os.environ.setdefault("DOTLIFE_ADMIN_PROFILE_IDS", '["admin-profile"]')

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import dotlife.db.models  # noqa: F401
from dotlife.auth.jwt import create_access_token
from dotlife.config import get_settings
from dotlife.database import get_session
from dotlife.db.base import Base
from dotlife.main import create_app
from dotlife.profiles.service import get_or_create_profile

get_settings.cache_clear()

TEST_PROFILE_ID = "11111111-2222-3333-4444-555555555555"
ADMIN_PROFILE_ID = "admin-profile"


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service tests and assertions."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def profile_id(db_session: AsyncSession) -> str:
    """A provisioned profile holding the starting bricks."""
    await get_or_create_profile(db_session, TEST_PROFILE_ID, "builder")
    await db_session.commit()
    return TEST_PROFILE_ID


@pytest.fixture
def app(session_factory: async_sessionmaker[AsyncSession]) -> FastAPI:
    application = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = _override_session
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated HTTP client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers(profile_id: str = TEST_PROFILE_ID, username: str | None = "builder") -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(profile_id, username)}"}


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient) -> AsyncClient:
    """Client carrying a valid token for TEST_PROFILE_ID."""
    client.headers.update(auth_headers())
    return client


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient) -> AsyncClient:
    """Client carrying a token for a configured admin profile."""
    client.headers.update(auth_headers(ADMIN_PROFILE_ID, "admin"))
    return client
