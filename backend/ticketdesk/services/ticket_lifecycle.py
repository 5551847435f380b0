"""
Ticket lifecycle: the one legal path through the four statuses.

OPEN -> IN_PROGRESS -> RESOLVED -> CLOSED

There is no skipping, no going back and no reopening. CLOSED is terminal.
The transition table below is keyed by every status so a new status cannot
be added without deciding its successor here.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from ticketdesk.core.exceptions import (
    InvalidStateTransitionError,
    NoOpTransitionError,
    ValidationError,
)
from ticketdesk.models.base import utcnow
from ticketdesk.models.ticket import TicketStatus


TRANSITIONS: Dict[TicketStatus, Optional[TicketStatus]] = {
    TicketStatus.OPEN: TicketStatus.IN_PROGRESS,
    TicketStatus.IN_PROGRESS: TicketStatus.RESOLVED,
    TicketStatus.RESOLVED: TicketStatus.CLOSED,
    TicketStatus.CLOSED: None,
}


@dataclass(frozen=True)
class StatusChange:
    """
    An accepted transition, ready to be persisted as a status log row.
    """

    old_status: TicketStatus
    new_status: TicketStatus
    changed_by: int
    changed_at: datetime


def next_status(current: TicketStatus) -> Optional[TicketStatus]:
    """Successor of a status, or None once the ticket is CLOSED."""
    return TRANSITIONS[current]


def parse_status(value: object) -> TicketStatus:
    """
    Parse a status literal strictly.

    Args:
        value: TicketStatus member or exact upper-case name

    Returns:
        TicketStatus

    Raises:
        ValidationError: For anything that is not one of the four statuses
    """
    if isinstance(value, TicketStatus):
        return value
    if isinstance(value, str):
        try:
            return TicketStatus(value)
        except ValueError:
            pass
    allowed = ", ".join(status.value for status in TicketStatus)
    raise ValidationError(
        message=f"Invalid status '{value}'. Allowed: {allowed}.",
        status=str(value),
    )


def validate_transition(
    current: TicketStatus,
    requested: TicketStatus,
    changed_by: int,
    changed_at: Optional[datetime] = None,
) -> StatusChange:
    """
    Check that requested is the successor of current.

    Args:
        current: Status the ticket holds now
        requested: Status the caller asked for
        changed_by: Id of the caller
        changed_at: Timestamp for the log row (defaults to now, UTC)

    Returns:
        StatusChange describing the accepted transition

    Raises:
        NoOpTransitionError: If requested equals current
        InvalidStateTransitionError: If requested is anything else but the
            successor, including any request on a CLOSED ticket
    """
    successor = next_status(current)
    allowed = successor.value if successor is not None else "none"

    if requested == current:
        raise NoOpTransitionError(
            message=f"Ticket is already in status '{current.value}'.",
            current_status=current.value,
            allowed_next=allowed,
        )

    if requested != successor:
        raise InvalidStateTransitionError(
            message=(
                f"Invalid status transition: {current.value} → {requested.value}. "
                f"Allowed: {current.value} → {allowed}."
            ),
            current_status=current.value,
            requested_status=requested.value,
            allowed_next=allowed,
        )

    return StatusChange(
        old_status=current,
        new_status=requested,
        changed_by=changed_by,
        changed_at=changed_at or utcnow(),
    )
