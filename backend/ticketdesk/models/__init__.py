"""
Database models package.

WHY: Centralizing model imports ensures Alembic can discover all models
for migration generation and makes it easier to import models elsewhere.
"""

from ticketdesk.models.base import Base, CreatedAtMixin, PrimaryKeyMixin, utcnow
from ticketdesk.models.user import User, UserRole
from ticketdesk.models.ticket import (
    Ticket,
    TicketStatus,
    TicketPriority,
    TicketComment,
    TicketStatusLog,
)

__all__ = [
    "Base",
    "CreatedAtMixin",
    "PrimaryKeyMixin",
    "utcnow",
    "User",
    "UserRole",
    "Ticket",
    "TicketStatus",
    "TicketPriority",
    "TicketComment",
    "TicketStatusLog",
]
