"""
Shared test fixtures and configuration for pytest.
"""

import os
import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DASHX_PRIVATE_KEY"] = "test-dashx-private-key"

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.auth import hash_password, create_session_token
from app.core.dashx import get_dashx_client
from app.db.database import Base, get_db_session
from app.db.models import UserModel, PostModel


# Test database URL (in-memory SQLite for unit tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def async_engine():
    """Create async test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_dashx():
    """Mock DashX client recording identify/track/deliver calls."""
    dashx = MagicMock()
    dashx.identify = AsyncMock(return_value=True)
    dashx.track = AsyncMock(return_value=True)
    dashx.deliver = AsyncMock(return_value=True)
    dashx.fetch_item = AsyncMock(
        side_effect=lambda identifier: {"identifier": identifier, "name": identifier.title()}
    )
    dashx.generate_identity_token = MagicMock(return_value="dashx-identity-token")
    return dashx


@pytest.fixture
async def test_client(db_session, mock_dashx) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with database and DashX overrides."""

    async def override_get_db_session():
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_dashx_client] = lambda: mock_dashx

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ User Fixtures ============

@pytest.fixture
def test_user_data():
    """Test user data."""
    return {
        "first_name": "Test",
        "last_name": "User",
        "email": "test@example.com",
        "password": "testpassword123",
    }


@pytest.fixture
async def test_user(db_session, test_user_data) -> UserModel:
    """Create a test user in the database."""
    user = UserModel(
        id="test-user-id-123",
        first_name=test_user_data["first_name"],
        last_name=test_user_data["last_name"],
        email=test_user_data["email"],
        password_hash=hash_password(test_user_data["password"]),
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
async def other_user(db_session) -> UserModel:
    """A second user, author of posts the test user reads."""
    user = UserModel(
        id="other-user-id-456",
        first_name="Other",
        last_name="Author",
        email="other@example.com",
        password_hash=hash_password("otherpassword123"),
    )
    db_session.add(user)
    await db_session.flush()
    return user


@pytest.fixture
def session_token(test_user) -> str:
    """Session token for the test user."""
    return create_session_token(test_user, "dashx-identity-token")


@pytest.fixture
def auth_headers(session_token) -> dict:
    """Authorization headers with test user token."""
    return {"Authorization": f"Bearer {session_token}"}


# ============ Post Fixtures ============

@pytest.fixture
def make_post(db_session):
    """Factory creating posts with controlled creation times."""
    base_time = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    async def _make_post(user, minutes: int = 0, post_id: str | None = None, text: str = "hello"):
        post = PostModel(
            user_id=user.id,
            text=text,
            created_at=base_time + timedelta(minutes=minutes),
        )
        if post_id is not None:
            post.id = post_id
        db_session.add(post)
        await db_session.flush()
        return post

    return _make_post


@pytest.fixture
async def test_post(make_post, other_user) -> PostModel:
    """A post by another user."""
    return await make_post(other_user, post_id="123", text="First post")
