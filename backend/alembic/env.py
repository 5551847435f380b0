"""
Alembic migration runner for TicketDesk.

Migrations always run online through the asyncpg engine, against the
metadata of the ticketdesk models. The database URL comes from
DATABASE_URL via ticketdesk settings; alembic.ini carries no URL.
"""

import asyncio

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from ticketdesk.core.config import settings
from ticketdesk.core.logging import configure_logging
from ticketdesk.models.base import Base
from ticketdesk.models import ticket, user  # noqa: F401  (registers tables)


def _configure_and_run(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=Base.metadata,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


async def migrate() -> None:
    """Apply pending revisions over a single unpooled connection."""
    engine = create_async_engine(settings.async_database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_configure_and_run)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("TicketDesk migrations run online only; drop --sql.")

configure_logging(settings.LOG_LEVEL)
asyncio.run(migrate())
