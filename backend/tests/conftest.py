"""
Pytest configuration and fixtures.

WHY: Fixtures provide reusable test setup/teardown logic, reducing
duplication and ensuring consistent test environments.
"""

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Callable, Dict
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

from ticketdesk.main import app
from ticketdesk.models.base import Base
from ticketdesk.models.user import User, UserRole
from ticketdesk.db.session import get_db
from ticketdesk.core.auth import create_access_token
from ticketdesk.core.identity import Identity
from tests.factories import UserFactory


# Test database URL
# WHY: Using SQLite for tests eliminates external database dependencies
# and makes tests faster. StaticPool keeps the single in-memory database
# alive across connections for the duration of a test.
TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """
    Create a test database engine.

    Function scope gives every test a fresh schema. Foreign keys are
    switched on so RESTRICT / CASCADE rules behave as in PostgreSQL.
    """
    engine = create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a test database session.

    Yields:
        AsyncSession: Database session for the test
    """
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test HTTP client.

    The get_db override mirrors production: commit when the handler
    succeeds, roll back when it raises.

    Yields:
        AsyncClient: HTTP client for making test requests
    """

    async def override_get_db():
        """Override database dependency with test session."""
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================================
# Users and tokens
# ============================================================================


@pytest_asyncio.fixture
async def manager(db_session: AsyncSession) -> User:
    return await UserFactory.create_manager(db_session, email="manager@example.com", name="Mia Manager")


@pytest_asyncio.fixture
async def support(db_session: AsyncSession) -> User:
    return await UserFactory.create_support(db_session, email="support@example.com", name="Sam Support")


@pytest_asyncio.fixture
async def other_support(db_session: AsyncSession) -> User:
    return await UserFactory.create_support(db_session, email="support2@example.com", name="Sky Support")


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="user@example.com", name="Uma User")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="user2@example.com", name="Ugo User")


def identity_for(user: User) -> Identity:
    """Identity the API would resolve for this user's token."""
    return Identity(user_id=user.id, role=UserRole(user.role))


def token_for(user: User) -> str:
    """Signed access token for a user, as issued at login."""
    return create_access_token(
        {"sub": str(user.id), "email": user.email, "role": UserRole(user.role).value}
    )


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """
    Build Authorization headers for a user.

    Usage:
        response = await client.get("/api/tickets", headers=auth_headers(manager))
    """

    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token_for(user)}"}

    return _headers
