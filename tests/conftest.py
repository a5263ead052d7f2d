# File: tests/conftest.py
"""Pytest configuration and fixtures."""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import dailyledger.models  # noqa: F401  registers every table on Base.metadata
from dailyledger.core.db import Base, build_engine, get_db
from dailyledger.core.security import hash_password
from dailyledger.main import create_app
from dailyledger.models.user import User
from tests.factories import UserFactory

# In-memory SQLite unless a real database is provided
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def make_engine(url: str = TEST_DATABASE_URL) -> AsyncEngine:
    return build_engine(url)


async def create_tables(engine: AsyncEngine, exclude: tuple[str, ...] = ()) -> None:
    """Create all tables except the ones named in ``exclude``."""
    tables = [t for t in Base.metadata.sorted_tables if t.name not in exclude]
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, tables=tables)


async def drop_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create fresh DB session for each test."""
    engine = make_engine()
    async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await create_tables(engine)

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    await drop_tables(engine)
    await engine.dispose()


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Logged-in operator used by the authenticated client."""
    return await UserFactory.create(
        db_session,
        username="maria",
        display_name="María",
        hashed_password=hash_password("testpass123"),
    )


@pytest_asyncio.fixture
async def client(db_session, test_user):
    """Create async test client with overridden DB and auth dependencies."""
    from dailyledger.api.auth import get_current_user

    app = create_app()

    async def override_get_db():
        yield db_session

    async def override_get_current_user():
        return test_user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.test_user = test_user
        ac.db_session = db_session
        yield ac


@pytest.fixture
async def unauthenticated_client(db_session: AsyncSession) -> AsyncClient:
    """AsyncClient with the real auth dependency (for login and auth failure tests)."""
    app = create_app()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        ac.db_session = db_session
        yield ac
