"""
Base model class for all SQLAlchemy models.

WHY: Centralizing common model functionality (timestamps, ID) in a base class
keeps the four ticket-desk tables consistent.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for every timestamp column."""
    return datetime.now(timezone.utc)


# Largest value an Integer primary key holds (PostgreSQL int4).
MAX_ID = 2**31 - 1


def is_valid_id(value: int) -> bool:
    """Whether value can be a primary key; anything else cannot match a row."""
    return 1 <= value <= MAX_ID


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.
    """

    pass


class CreatedAtMixin:
    """
    Mixin to add an immutable created_at timestamp to models.

    Users and tickets record when they were created and never change it.
    """

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class PrimaryKeyMixin:
    """
    Mixin to add an integer primary key to models.
    """

    id = Column(Integer, primary_key=True, index=True)
