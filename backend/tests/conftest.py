"""
Pytest configuration and shared fixtures for backend tests.
"""

import sys
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from datetime import UTC, datetime, timedelta
from typing import AsyncGenerator
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Import after path is set
from infrastructure.database.models import (
    Base,
    Category,
    Subcategory,
    User,
    UserSubscription,
)
from infrastructure.database.connection import get_db
from core.security import PasswordHasher, TokenService
from infrastructure.config import get_settings
from services.principal_cache import principal_cache

# Initialize security services; 4 rounds keeps bcrypt fast in tests
password_hasher = PasswordHasher(rounds=4)
settings = get_settings()
token_service = TokenService(secret_key=settings.jwt_secret_key)

TEST_PASSWORD = "TestPassword123"

# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def clear_principal_cache():
    """The principal cache is process-wide; start every test empty."""
    principal_cache.clear()
    yield
    principal_cache.clear()


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


async def _create_user(
    db_session: AsyncSession,
    email: str,
    username: str,
    is_admin: bool = False,
    tier: str | None = None,
) -> User:
    user = User(
        id=str(uuid4()),
        email=email,
        username=username,
        first_name=username.capitalize(),
        password_hash=password_hasher.hash(TEST_PASSWORD),
        is_admin=is_admin,
        status="active",
    )
    db_session.add(user)
    if tier is not None:
        db_session.add(
            UserSubscription(
                id=str(uuid4()),
                user_id=user.id,
                tier=tier,
                status="active",
                billing_interval="monthly",
                started_at=datetime.now(UTC),
                expires_at=datetime.now(UTC) + timedelta(days=30),
            )
        )
    await db_session.commit()
    await db_session.refresh(user)
    return user


def _headers(user: User) -> dict:
    access_token = token_service.create_access_token(user_id=user.id, email=user.email)
    return {"Authorization": f"Bearer {access_token}"}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Signed-in user with no subscription (sees Explorer content)."""
    return await _create_user(db_session, "test@example.com", "tester")


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user."""
    return _headers(test_user)


@pytest.fixture
async def builder_user(db_session: AsyncSession) -> User:
    """User with an active Builder subscription."""
    return await _create_user(db_session, "builder@example.com", "builder", tier="Builder")


@pytest.fixture
def builder_headers(builder_user: User) -> dict:
    return _headers(builder_user)


@pytest.fixture
async def innovator_user(db_session: AsyncSession) -> User:
    """User with an active Innovator subscription."""
    return await _create_user(db_session, "innovator@example.com", "innovator", tier="Innovator")


@pytest.fixture
def innovator_headers(innovator_user: User) -> dict:
    return _headers(innovator_user)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Admin with no subscription; admins see everything regardless."""
    return await _create_user(db_session, "admin@example.com", "admin", is_admin=True)


@pytest.fixture
def admin_token(admin_user: User) -> dict:
    """Generate authentication headers for the admin user."""
    return _headers(admin_user)


@pytest.fixture
async def category(db_session: AsyncSession) -> Category:
    category = Category(id=str(uuid4()), name="Java", title="Java", tier="Explorer")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest.fixture
async def subcategory(db_session: AsyncSession, category: Category) -> Subcategory:
    subcategory = Subcategory(
        id=str(uuid4()),
        category_id=category.id,
        name="Collections",
        title="Java Collections",
        tier="Explorer",
    )
    db_session.add(subcategory)
    await db_session.commit()
    await db_session.refresh(subcategory)
    return subcategory


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here to avoid circular imports
    from main import app

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    # Reset rate limiter state between tests to prevent cross-test 429s
    if hasattr(app.state, "limiter"):
        app.state.limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
