"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file with the schema created from the
model metadata, and an app instance bound to it. Uses polyfactory for
type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlmodel import SQLModel

import src.crm.models  # noqa: F401 - registers tables on SQLModel.metadata
from src.crm.core.db import Database
from src.crm.core.health import reset_health_cache
from src.crm.main import create_app
from src.crm.models import User
from tests.factories import UserFactory
from tests.helpers import auth_headers


@pytest.fixture(autouse=True)
def clear_health_cache():
    """Health results are cached at module level; start every test cold."""
    reset_health_cache()
    yield
    reset_health_cache()


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """Create a throwaway database with every table."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'crm.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for arranging and inspecting data.

    The session does NOT auto-commit. Tests must explicitly call
    `await session.commit()` before the API can see their rows.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def app(engine: AsyncEngine) -> FastAPI:
    return create_app(database=Database(engine))


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def _persist(session: AsyncSession, user: User) -> User:
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, UserFactory.admin(email="admin@example.com"))


@pytest.fixture
async def trainer_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, UserFactory.trainer(email="trainer@example.com"))


@pytest.fixture
async def member_user(db_session: AsyncSession) -> User:
    return await _persist(db_session, UserFactory.build(email="member@example.com"))


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def trainer_headers(trainer_user: User) -> dict[str, str]:
    return auth_headers(trainer_user)


@pytest.fixture
def member_headers(member_user: User) -> dict[str, str]:
    return auth_headers(member_user)
