"""Pytest configuration and fixtures for Blog API tests.

Database Handling:
- Uses TEST_DATABASE_URL when set (e.g. a PostgreSQL asyncpg URL)
- Otherwise runs against an in-memory SQLite database via aiosqlite
- Every test gets a freshly created schema that is dropped afterwards
"""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Set test environment variables before importing app modules
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["JWT_SECRET_KEY"] = "k3y-for-unit-tests-0123456789abcdefghij"
# Cheap Argon2 parameters keep the suite fast
os.environ["PASSWORD_HASH_TIME_COST"] = "1"
os.environ["PASSWORD_HASH_MEMORY_COST"] = "1024"
os.environ["PASSWORD_HASH_PARALLELISM"] = "1"

# Test user credentials
TEST_USER_EMAIL = "alice@example.com"
TEST_USER_PASSWORD = "password123"
OTHER_USER_EMAIL = "bob@example.com"
OTHER_USER_PASSWORD = "hunter2hunter2"


# --- Database Fixtures ---


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a database engine with all tables for one test."""
    from blog_api.core.database import enable_sqlite_foreign_keys
    from blog_api.models.base import BaseModel

    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection, otherwise each checkout sees an empty database
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        enable_sqlite_foreign_keys(engine)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database override."""
    from blog_api.core.database import get_db
    from blog_api.main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(scope="module")
def sync_client() -> Generator[TestClient, None, None]:
    """Synchronous client without database override.

    Use for endpoints that don't need tables.
    """
    from blog_api.main import app

    with TestClient(app) as client:
        yield client


# --- Test Factories ---


@pytest.fixture
def user_factory(db_session):
    """Factory for creating test User objects."""
    from blog_api.models import User
    from blog_api.services.auth import hash_password

    async def _create_user(
        email: str = TEST_USER_EMAIL,
        password: str = TEST_USER_PASSWORD,
    ) -> User:
        user = User(
            email=email.lower(),
            password_hash=hash_password(password),
        )
        db_session.add(user)
        await db_session.flush()
        await db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def post_factory(db_session):
    """Factory for creating test Post objects."""
    from blog_api.models import Post

    async def _create_post(owner, title: str = "Test Post", body: str = "Test body") -> Post:
        post = Post(title=title, body=body, owner_id=owner.id)
        db_session.add(post)
        await db_session.flush()
        await db_session.refresh(post)
        return post

    return _create_post


@pytest_asyncio.fixture
async def user(user_factory):
    """Create the primary test user (alice)."""
    return await user_factory()


@pytest_asyncio.fixture
async def other_user(user_factory):
    """Create a second user (bob)."""
    return await user_factory(email=OTHER_USER_EMAIL, password=OTHER_USER_PASSWORD)


def bearer(user) -> dict[str, str]:
    """Authorization header carrying a fresh token for ``user``."""
    from blog_api.services.auth import create_access_token

    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest_asyncio.fixture
async def auth_headers(user) -> dict[str, str]:
    """Headers with a session token for the primary test user."""
    return bearer(user)


@pytest_asyncio.fixture
async def other_headers(other_user) -> dict[str, str]:
    """Headers with a session token for the second user."""
    return bearer(other_user)


# --- Pytest Hooks for Auto-Marking ---


def pytest_collection_modifyitems(config, items):
    """Mark tests as 'integration' when they touch the database or app."""
    integration_fixtures = {"db_session", "db_engine", "async_client", "sync_client"}

    for item in items:
        if any(mark.name in ("unit", "integration") for mark in item.iter_markers()):
            continue

        if integration_fixtures & set(getattr(item, "fixturenames", ())):
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
