"""
Access policy for tickets, comments and users.

WHAT: One predicate per operation, evaluated against a verified Identity and
the minimal state of the resource involved.

WHY: Every service consults this module instead of comparing roles inline,
so the answer to "who may do X" lives in exactly one place. Ticket
visibility, in particular, is shared by viewing, listing, commenting and
reading the status log.

HOW:
- can_*() return a bool and never touch the database.
- ensure_*() raise AuthorizationError naming the missing permission.
- ticket_list_scope() turns the visibility rule into DAO filters.

Rules:
    CreateTicket            MANAGER, USER
    View/List ticket        MANAGER; SUPPORT if assignee; USER if creator
    AssignTicket            MANAGER, SUPPORT
    UpdateStatus            MANAGER; SUPPORT if assignee
    DeleteTicket            MANAGER
    CreateUser / ListUsers  MANAGER
    Edit/Delete comment     MANAGER or author
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from ticketdesk.core.exceptions import AuthorizationError
from ticketdesk.core.identity import Identity
from ticketdesk.models.user import UserRole


class TicketRef(Protocol):
    """Ticket state the policy needs."""

    created_by_user_id: int
    assigned_to_user_id: Optional[int]


class CommentRef(Protocol):
    """Comment state the policy needs."""

    user_id: int


@dataclass(frozen=True)
class TicketListScope:
    """
    DAO filters equivalent to the visibility rule.

    Both None means "every ticket".
    """

    created_by_user_id: Optional[int] = None
    assigned_to_user_id: Optional[int] = None


# ============================================================================
# Ticket predicates
# ============================================================================


def can_create_ticket(identity: Identity) -> bool:
    return identity.role in (UserRole.MANAGER, UserRole.USER)


def can_view_ticket(identity: Identity, ticket: TicketRef) -> bool:
    """
    Whether the caller may see a ticket.

    SUPPORT sees only what is assigned to them, USER only what they
    created. An unassigned ticket is invisible to every SUPPORT user.
    """
    if identity.is_manager:
        return True
    if identity.is_support:
        return ticket.assigned_to_user_id == identity.user_id
    return ticket.created_by_user_id == identity.user_id


def can_assign_ticket(identity: Identity) -> bool:
    return identity.role in (UserRole.MANAGER, UserRole.SUPPORT)


def can_update_status(identity: Identity, ticket: TicketRef) -> bool:
    if identity.is_manager:
        return True
    if identity.is_support:
        return ticket.assigned_to_user_id == identity.user_id
    return False


def can_delete_ticket(identity: Identity) -> bool:
    return identity.is_manager


def ticket_list_scope(identity: Identity) -> TicketListScope:
    """
    Filters that select exactly the tickets can_view_ticket() allows.

    Args:
        identity: Verified caller

    Returns:
        TicketListScope for TicketDAO.list()
    """
    if identity.is_manager:
        return TicketListScope()
    if identity.is_support:
        return TicketListScope(assigned_to_user_id=identity.user_id)
    return TicketListScope(created_by_user_id=identity.user_id)


# ============================================================================
# Comment and user predicates
# ============================================================================


def can_modify_comment(identity: Identity, comment: CommentRef) -> bool:
    """Only the author or a MANAGER may edit or delete a comment."""
    return identity.is_manager or comment.user_id == identity.user_id


def can_manage_users(identity: Identity) -> bool:
    return identity.is_manager


# ============================================================================
# Enforcement
# ============================================================================


def deny(identity: Identity, message: str, **context) -> AuthorizationError:
    """Build the AuthorizationError for a denied caller."""
    return AuthorizationError(
        message=message,
        user_id=identity.user_id,
        role=identity.role.value,
        **context,
    )


def ensure_can_create_ticket(identity: Identity) -> None:
    if not can_create_ticket(identity):
        raise deny(identity, f"{identity.role.value} role cannot create tickets.")


def ensure_can_view_ticket(identity: Identity, ticket: TicketRef, ticket_id: int) -> None:
    if not can_view_ticket(identity, ticket):
        raise deny(identity, "You do not have access to this ticket.", ticket_id=ticket_id)


def ensure_can_assign_ticket(identity: Identity, ticket_id: int) -> None:
    if not can_assign_ticket(identity):
        raise deny(
            identity, "Only MANAGER or SUPPORT can assign tickets.", ticket_id=ticket_id
        )


def ensure_can_update_status(identity: Identity, ticket: TicketRef, ticket_id: int) -> None:
    if can_update_status(identity, ticket):
        return
    if identity.is_support:
        raise deny(
            identity, "You can only update tickets assigned to you.", ticket_id=ticket_id
        )
    raise deny(identity, "USER role cannot update ticket status.", ticket_id=ticket_id)


def ensure_can_delete_ticket(identity: Identity, ticket_id: int) -> None:
    if not can_delete_ticket(identity):
        raise deny(identity, "Only MANAGER can delete tickets.", ticket_id=ticket_id)


def ensure_can_create_user(identity: Identity) -> None:
    if not can_manage_users(identity):
        raise deny(identity, "Only MANAGER can create users.")


def ensure_can_list_users(identity: Identity) -> None:
    if not can_manage_users(identity):
        raise deny(identity, "Only MANAGER can list users.")
