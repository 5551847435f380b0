"""
Ticket Service.

WHAT: Business logic for creating, listing, assigning, moving and deleting
tickets, and for reading their status history.

WHY: The service layer:
1. Runs checks in a fixed order per operation (existence, policy, rules)
2. Keeps the access policy and lifecycle free of I/O
3. Pairs every status change with exactly one log row

HOW: Orchestrates TicketDAO, TicketStatusLogDAO and UserDAO inside the
caller's session. The request transaction commits or rolls back the whole
operation; nothing here commits.
"""

import logging
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.exceptions import (
    ConcurrentModificationError,
    InvalidAssigneeError,
    TicketNotFoundError,
    UserNotFoundError,
)
from ticketdesk.core.identity import Identity
from ticketdesk.dao.ticket import TicketDAO, TicketStatusLogDAO
from ticketdesk.dao.user import UserDAO
from ticketdesk.models.ticket import Ticket, TicketPriority, TicketStatus, TicketStatusLog
from ticketdesk.models.user import User, UserRole
from ticketdesk.services import access_policy
from ticketdesk.services.ticket_lifecycle import parse_status, validate_transition

logger = logging.getLogger(__name__)


class TicketService:
    """
    Service for ticket operations.

    Every public method takes the verified caller first.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize TicketService.

        Args:
            session: Async database session
        """
        self.session = session
        self.ticket_dao = TicketDAO(session)
        self.status_log_dao = TicketStatusLogDAO(session)
        self.user_dao = UserDAO(User, session)

    async def _get_ticket(self, ticket_id: int, for_update: bool = False) -> Ticket:
        ticket = await self.ticket_dao.get_by_id(ticket_id, for_update=for_update)
        if ticket is None:
            raise TicketNotFoundError(ticket_id=ticket_id)
        return ticket

    async def create_ticket(
        self,
        identity: Identity,
        title: str,
        description: str,
        priority: TicketPriority = TicketPriority.MEDIUM,
    ) -> Ticket:
        """
        Create a ticket owned by the caller.

        Args:
            identity: Verified caller
            title: Ticket title
            description: Ticket description
            priority: LOW, MEDIUM or HIGH

        Returns:
            New ticket in status OPEN, unassigned

        Raises:
            AuthorizationError: If the caller is SUPPORT
        """
        access_policy.ensure_can_create_ticket(identity)

        ticket = await self.ticket_dao.create(
            created_by_user_id=identity.user_id,
            title=title,
            description=description,
            priority=priority,
        )

        logger.info(
            "Ticket %s created by user %s (priority=%s)",
            ticket.id,
            identity.user_id,
            ticket.priority.value,
        )
        return ticket

    async def list_tickets(self, identity: Identity) -> List[Ticket]:
        """
        List the tickets the caller may see, ordered by id.

        MANAGER sees all, SUPPORT sees tickets assigned to them, USER sees
        tickets they created.
        """
        scope = access_policy.ticket_list_scope(identity)
        return await self.ticket_dao.list(
            created_by_user_id=scope.created_by_user_id,
            assigned_to_user_id=scope.assigned_to_user_id,
        )

    async def assign_ticket(self, identity: Identity, ticket_id: int, user_id: int) -> Ticket:
        """
        Assign a ticket to a MANAGER or SUPPORT user.

        Check order: ticket exists, caller may assign, target exists,
        target is not a USER.

        Args:
            identity: Verified caller
            ticket_id: Ticket to assign
            user_id: New assignee

        Returns:
            Updated ticket; status is unchanged

        Raises:
            TicketNotFoundError: If the ticket does not exist
            AuthorizationError: If the caller is a USER
            UserNotFoundError: If the target user does not exist
            InvalidAssigneeError: If the target user has role USER
        """
        await self._get_ticket(ticket_id)

        access_policy.ensure_can_assign_ticket(identity, ticket_id)

        assignee = await self.user_dao.get_by_id(user_id)
        if assignee is None:
            raise UserNotFoundError(user_id=user_id)

        if assignee.role == UserRole.USER:
            raise InvalidAssigneeError(ticket_id=ticket_id, user_id=user_id)

        ticket = await self.ticket_dao.assign(ticket_id, user_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id=ticket_id)

        logger.info(
            "Ticket %s assigned to user %s by user %s", ticket_id, user_id, identity.user_id
        )
        return ticket

    async def update_status(self, identity: Identity, ticket_id: int, status: object) -> Ticket:
        """
        Move a ticket to the next status and log the change.

        Check order: status literal, ticket exists (row locked), caller may
        update, transition is the successor. The status write is a
        compare-and-set; when it misses, the fresh status is validated
        again so a duplicate request reports NoOpTransitionError rather
        than writing a second log row.

        Args:
            identity: Verified caller
            ticket_id: Ticket to move
            status: Requested status (TicketStatus or its name)

        Returns:
            Updated ticket

        Raises:
            ValidationError: If status is not a known literal
            TicketNotFoundError: If the ticket does not exist
            AuthorizationError: If the caller may not move this ticket
            NoOpTransitionError: If the ticket already holds that status
            InvalidStateTransitionError: If status is not the successor
            ConcurrentModificationError: If the row changed in a way that
                still permits the transition (caller may retry)
        """
        requested: TicketStatus = parse_status(status)

        ticket = await self._get_ticket(ticket_id, for_update=True)

        access_policy.ensure_can_update_status(identity, ticket, ticket_id)

        change = validate_transition(ticket.status, requested, identity.user_id)

        applied = await self.ticket_dao.change_status(
            ticket_id,
            expected_status=change.old_status,
            new_status=change.new_status,
            changed_by_user_id=change.changed_by,
            changed_at=change.changed_at,
        )
        if not applied:
            current = await self._get_ticket(ticket_id)
            validate_transition(current.status, requested, identity.user_id)
            raise ConcurrentModificationError(
                message="Ticket status changed while the update was in progress.",
                ticket_id=ticket_id,
            )

        logger.info(
            "Ticket %s status %s -> %s by user %s",
            ticket_id,
            change.old_status.value,
            change.new_status.value,
            identity.user_id,
        )
        return await self.ticket_dao.get_by_id_with_relations(ticket_id)

    async def delete_ticket(self, identity: Identity, ticket_id: int) -> None:
        """
        Delete a ticket with its comments and status logs.

        Raises:
            TicketNotFoundError: If the ticket does not exist
            AuthorizationError: If the caller is not a MANAGER
        """
        await self._get_ticket(ticket_id)

        access_policy.ensure_can_delete_ticket(identity, ticket_id)

        await self.ticket_dao.delete(ticket_id)
        logger.info("Ticket %s deleted by user %s", ticket_id, identity.user_id)

    async def list_status_logs(self, identity: Identity, ticket_id: int) -> List[TicketStatusLog]:
        """
        Return a ticket's status history, oldest first.

        Visible to whoever may view the ticket.

        Raises:
            TicketNotFoundError: If the ticket does not exist
            AuthorizationError: If the caller may not view the ticket
        """
        ticket = await self._get_ticket(ticket_id)

        access_policy.ensure_can_view_ticket(identity, ticket, ticket_id)

        return await self.status_log_dao.list_for_ticket(ticket_id)
