"""
Data Access Object (DAO) package.

WHY: DAOs provide a clean separation between database operations and business logic,
making the codebase more testable and maintainable.
"""

from ticketdesk.dao.base import BaseDAO
from ticketdesk.dao.user import UserDAO
from ticketdesk.dao.ticket import TicketDAO, TicketCommentDAO, TicketStatusLogDAO

__all__ = [
    "BaseDAO",
    "UserDAO",
    "TicketDAO",
    "TicketCommentDAO",
    "TicketStatusLogDAO",
]
