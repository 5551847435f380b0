"""
Database session management.

WHY: Each request gets one AsyncSession and therefore one transaction. A
ticket status change and its log row are flushed in that transaction and
committed together when the request succeeds, or rolled back together when
anything raises.
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ticketdesk.core.config import settings


def build_engine(url: str = settings.async_database_url) -> AsyncEngine:
    """
    Create the application engine.

    Pool sizing comes from DB_POOL_SIZE and DB_MAX_OVERFLOW; SQL echo from
    DB_ECHO.
    """
    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
    )


engine = build_engine()

# Rows stay readable after commit so routers can serialize them.
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session inside a single transaction.

    session.begin() commits when the handler returns and rolls back when it
    raises; services only flush.

    Yields:
        AsyncSession: Database session for the request
    """
    async with AsyncSessionLocal() as session, session.begin():
        yield session
