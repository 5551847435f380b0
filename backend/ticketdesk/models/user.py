"""
User model.

WHY: Users are the callers of every ticket operation. Their role is one of a
closed set of three values and decides, together with ticket ownership and
assignment, what they may do.
"""

import enum
from typing import Optional

from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship

from ticketdesk.models.base import Base, CreatedAtMixin, PrimaryKeyMixin


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    The set is closed: any other literal is rejected wherever a role is
    parsed (request bodies, query filters, token claims).
    """

    MANAGER = "MANAGER"  # Full access to tickets and users
    SUPPORT = "SUPPORT"  # Works tickets assigned to them
    USER = "USER"  # Creates tickets and follows their own

    @classmethod
    def parse(cls, value: object) -> Optional["UserRole"]:
        """
        Parse a role literal strictly.

        Args:
            value: Candidate role (enum member or exact upper-case string)

        Returns:
            Matching UserRole, or None when the value is not a known role
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None


class User(Base, PrimaryKeyMixin, CreatedAtMixin):
    """
    User model representing a person who interacts with tickets.

    Email is unique (enforced by a database constraint) and stored
    lower-cased so the constraint also rejects case variants.
    """

    __tablename__ = "users"

    # User identification
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Authentication
    hashed_password = Column(String(255), nullable=False)

    # Authorization
    role = Column(Enum(UserRole, name="userrole"), nullable=False, default=UserRole.USER)

    # Ticket relationships
    created_tickets = relationship(
        "Ticket",
        back_populates="created_by",
        foreign_keys="Ticket.created_by_user_id",
    )
    assigned_tickets = relationship(
        "Ticket",
        back_populates="assigned_to",
        foreign_keys="Ticket.assigned_to_user_id",
    )
    ticket_comments = relationship("TicketComment", back_populates="user")
    status_changes = relationship("TicketStatusLog", back_populates="changed_by")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
