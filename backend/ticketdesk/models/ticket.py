"""
Ticket models for the support desk.

WHAT: SQLAlchemy models for tickets, their comments and their status log.

WHY: A ticket moves through a fixed, linear sequence of statuses
(OPEN -> IN_PROGRESS -> RESOLVED -> CLOSED). Every transition leaves exactly
one append-only TicketStatusLog row. Comments and log rows belong to their
ticket and disappear with it; the users they reference cannot be deleted
while those rows exist.

HOW: Uses SQLAlchemy 2.0 typed mappings with:
- Enums for status and priority fields
- ON DELETE CASCADE from comments/logs to tickets
- ON DELETE RESTRICT from comments/logs/creator to users
- ON DELETE SET NULL for the optional assignee
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import (
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Enum as SQLEnum,
    Index,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from ticketdesk.models.base import Base, utcnow

if TYPE_CHECKING:
    from ticketdesk.models.user import User


# ============================================================================
# Enums
# ============================================================================


class TicketStatus(str, Enum):
    """
    Ticket status values.

    - OPEN: New ticket, nobody working on it yet
    - IN_PROGRESS: Being worked on
    - RESOLVED: Fix delivered, awaiting closure
    - CLOSED: Terminal, no further status changes
    """

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class TicketPriority(str, Enum):
    """Ticket priority levels."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# ============================================================================
# Ticket Model
# ============================================================================


class Ticket(Base):
    """
    Support ticket.

    created_by_user_id is set once at creation. assigned_to_user_id, when
    present, references a MANAGER or SUPPORT user (enforced by the
    assignment rule, not by the schema).
    """

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_by_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    assigned_to_user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Ticket details
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Classification
    status: Mapped[TicketStatus] = mapped_column(
        SQLEnum(TicketStatus, name="ticketstatus"),
        default=TicketStatus.OPEN,
        nullable=False,
    )
    priority: Mapped[TicketPriority] = mapped_column(
        SQLEnum(TicketPriority, name="ticketpriority"),
        default=TicketPriority.MEDIUM,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    created_by: Mapped["User"] = relationship(
        "User", foreign_keys=[created_by_user_id], back_populates="created_tickets"
    )
    assigned_to: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[assigned_to_user_id], back_populates="assigned_tickets"
    )
    comments: Mapped[List["TicketComment"]] = relationship(
        "TicketComment",
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    status_logs: Mapped[List["TicketStatusLog"]] = relationship(
        "TicketStatusLog",
        back_populates="ticket",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_tickets_status", "status"),
        Index("ix_tickets_created_by", "created_by_user_id"),
        Index("ix_tickets_assigned_to", "assigned_to_user_id"),
    )

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, title='{self.title[:30]}', status={self.status.value})>"


# ============================================================================
# Comment Model
# ============================================================================


class TicketComment(Base):
    """
    Comment on a ticket.

    Editable only by its author or a MANAGER; updated_at is set on edit.
    """

    __tablename__ = "ticket_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )

    comment: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    ticket: Mapped["Ticket"] = relationship("Ticket", back_populates="comments")
    user: Mapped["User"] = relationship("User", back_populates="ticket_comments")

    __table_args__ = (
        Index("ix_ticket_comments_ticket_id", "ticket_id"),
        Index("ix_ticket_comments_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<TicketComment(id={self.id}, ticket_id={self.ticket_id})>"

    @property
    def is_edited(self) -> bool:
        """Check if comment has been edited."""
        return self.updated_at is not None


# ============================================================================
# Status Log Model
# ============================================================================


class TicketStatusLog(Base):
    """
    Audit row written for every successful status transition.

    Append-only: rows are inserted together with the status update they
    describe and are only ever removed by deleting the ticket.
    """

    __tablename__ = "ticket_status_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False
    )
    old_status: Mapped[TicketStatus] = mapped_column(
        SQLEnum(TicketStatus, name="ticketstatus"), nullable=False
    )
    new_status: Mapped[TicketStatus] = mapped_column(
        SQLEnum(TicketStatus, name="ticketstatus"), nullable=False
    )
    changed_by_user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    ticket: Mapped["Ticket"] = relationship("Ticket", back_populates="status_logs")
    changed_by: Mapped["User"] = relationship("User", back_populates="status_changes")

    __table_args__ = (Index("ix_ticket_status_logs_ticket_id", "ticket_id"),)

    def __repr__(self) -> str:
        return (
            f"<TicketStatusLog(ticket_id={self.ticket_id}, "
            f"{self.old_status.value} -> {self.new_status.value})>"
        )
