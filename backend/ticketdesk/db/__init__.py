"""Database package"""

from ticketdesk.db.session import AsyncSessionLocal, engine, get_db
from ticketdesk.models.base import Base

__all__ = ["Base", "AsyncSessionLocal", "engine", "get_db"]
