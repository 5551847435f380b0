"""
Ticket Data Access Object.

WHAT: DAOs for tickets, ticket comments and the ticket status log.

WHY: Encapsulates all ticket database operations with:
1. Visibility filters supplied by the access policy (never decided here)
2. Compare-and-set status updates paired with their audit row
3. Explicit cascade on ticket delete (comments and logs go first)
4. Ordered, countable comment pages

HOW: Uses SQLAlchemy 2.0 async with the request-scoped session. Nothing in
this module commits; the caller's transaction decides.
"""

from datetime import datetime
from typing import Optional, List, Tuple

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ticketdesk.models.base import is_valid_id, utcnow
from ticketdesk.models.ticket import (
    Ticket,
    TicketStatus,
    TicketPriority,
    TicketComment,
    TicketStatusLog,
)


class TicketDAO:
    """
    Data Access Object for Ticket operations.

    WHAT: Manages ticket CRUD, assignment and status persistence.

    HOW: All methods are async and share the session passed in.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize TicketDAO with database session.

        Args:
            session: AsyncSession for database operations
        """
        self.session = session

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    async def create(
        self,
        created_by_user_id: int,
        title: str,
        description: str,
        priority: TicketPriority = TicketPriority.MEDIUM,
    ) -> Ticket:
        """
        Create a new support ticket.

        New tickets always start OPEN and unassigned.

        Args:
            created_by_user_id: User creating the ticket
            title: Ticket title
            description: Detailed description
            priority: Ticket priority

        Returns:
            Created Ticket with creator loaded
        """
        ticket = Ticket(
            created_by_user_id=created_by_user_id,
            title=title,
            description=description,
            status=TicketStatus.OPEN,
            priority=priority,
            assigned_to_user_id=None,
            created_at=utcnow(),
        )

        self.session.add(ticket)
        await self.session.flush()

        return await self.get_by_id_with_relations(ticket.id)

    async def get_by_id(
        self,
        ticket_id: int,
        for_update: bool = False,
    ) -> Optional[Ticket]:
        """
        Get ticket by ID.

        Args:
            ticket_id: Ticket ID
            for_update: Lock the row until the transaction ends
                (no-op on SQLite)

        Returns:
            Ticket or None if not found
        """
        if not is_valid_id(ticket_id):
            return None

        query = select(Ticket).where(Ticket.id == ticket_id).execution_options(
            populate_existing=True
        )

        if for_update:
            query = query.with_for_update()

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_id_with_relations(self, ticket_id: int) -> Optional[Ticket]:
        """
        Get ticket by ID with creator and assignee loaded.

        Always re-reads the row so callers see writes made through
        bulk UPDATE statements.

        Args:
            ticket_id: Ticket ID

        Returns:
            Ticket with relations or None
        """
        if not is_valid_id(ticket_id):
            return None

        query = (
            select(Ticket)
            .options(
                selectinload(Ticket.created_by),
                selectinload(Ticket.assigned_to),
            )
            .where(Ticket.id == ticket_id)
            .execution_options(populate_existing=True)
        )

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list(
        self,
        created_by_user_id: Optional[int] = None,
        assigned_to_user_id: Optional[int] = None,
    ) -> List[Ticket]:
        """
        List tickets ordered by id.

        Filters are combined with AND. Passing neither lists every ticket.

        Args:
            created_by_user_id: Only tickets this user created
            assigned_to_user_id: Only tickets assigned to this user

        Returns:
            List of tickets with creator and assignee loaded
        """
        query = select(Ticket).options(
            selectinload(Ticket.created_by),
            selectinload(Ticket.assigned_to),
        ).execution_options(populate_existing=True)

        if created_by_user_id is not None:
            query = query.where(Ticket.created_by_user_id == created_by_user_id)
        if assigned_to_user_id is not None:
            query = query.where(Ticket.assigned_to_user_id == assigned_to_user_id)

        query = query.order_by(Ticket.id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete(self, ticket_id: int) -> bool:
        """
        Delete a ticket together with its comments and status logs.

        Children are removed first so the delete behaves the same whether
        or not the database enforces ON DELETE CASCADE.

        Args:
            ticket_id: Ticket ID

        Returns:
            True if deleted, False if not found
        """
        if not is_valid_id(ticket_id):
            return False
        await self.session.execute(
            delete(TicketComment).where(TicketComment.ticket_id == ticket_id)
        )
        await self.session.execute(
            delete(TicketStatusLog).where(TicketStatusLog.ticket_id == ticket_id)
        )
        result = await self.session.execute(delete(Ticket).where(Ticket.id == ticket_id))
        return result.rowcount > 0

    # =========================================================================
    # Assignment and Status
    # =========================================================================

    async def assign(self, ticket_id: int, assigned_to_user_id: int) -> Optional[Ticket]:
        """
        Set the ticket's assignee.

        Status is untouched; assignment never writes a status log row.

        Args:
            ticket_id: Ticket ID
            assigned_to_user_id: User ID to assign

        Returns:
            Updated Ticket, or None if the ticket no longer exists
        """
        await self.session.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id)
            .values(assigned_to_user_id=assigned_to_user_id)
            .execution_options(synchronize_session=False)
        )
        return await self.get_by_id_with_relations(ticket_id)

    async def change_status(
        self,
        ticket_id: int,
        expected_status: TicketStatus,
        new_status: TicketStatus,
        changed_by_user_id: int,
        changed_at: Optional[datetime] = None,
    ) -> bool:
        """
        Compare-and-set the ticket status and append the status log row.

        WHAT: UPDATE ... SET status = new WHERE id = ? AND status = expected,
        then INSERT the matching TicketStatusLog row.

        WHY: Two requests validated against the same old status must not
        both succeed. Only the one whose UPDATE matched a row writes a log
        entry; the other sees rowcount 0 and gets False back.

        Args:
            ticket_id: Ticket ID
            expected_status: Status the transition was validated against
            new_status: Status to write
            changed_by_user_id: Caller performing the change
            changed_at: Log timestamp (defaults to now, UTC)

        Returns:
            True if the status was changed and logged, False if the row no
            longer holds expected_status (or is gone)
        """
        result = await self.session.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id, Ticket.status == expected_status)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        self.session.add(
            TicketStatusLog(
                ticket_id=ticket_id,
                old_status=expected_status,
                new_status=new_status,
                changed_by_user_id=changed_by_user_id,
                changed_at=changed_at or utcnow(),
            )
        )
        await self.session.flush()
        return True


class TicketCommentDAO:
    """
    Data Access Object for TicketComment operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        ticket_id: int,
        user_id: int,
        comment: str,
    ) -> TicketComment:
        """
        Create a new comment on a ticket.

        Args:
            ticket_id: Ticket ID
            user_id: Author
            comment: Comment body

        Returns:
            Created TicketComment with author loaded
        """
        row = TicketComment(
            ticket_id=ticket_id,
            user_id=user_id,
            comment=comment,
            created_at=utcnow(),
        )

        self.session.add(row)
        await self.session.flush()

        return await self.get_by_id(row.id)

    async def get_by_id(self, comment_id: int) -> Optional[TicketComment]:
        """Get comment by ID with its author loaded."""
        if not is_valid_id(comment_id):
            return None

        query = (
            select(TicketComment)
            .options(selectinload(TicketComment.user))
            .where(TicketComment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_for_ticket(
        self,
        ticket_id: int,
        offset: int = 0,
        limit: int = 20,
    ) -> Tuple[List[TicketComment], int]:
        """
        List one page of a ticket's comments, oldest first.

        Ties on created_at are broken by id so pages never overlap.

        Args:
            ticket_id: Ticket ID
            offset: Rows to skip
            limit: Rows to return

        Returns:
            Tuple of (comments on this page, total comments on the ticket)
        """
        count_query = select(func.count(TicketComment.id)).where(
            TicketComment.ticket_id == ticket_id
        )
        total = (await self.session.execute(count_query)).scalar_one()
        if offset >= total:
            return [], total

        query = (
            select(TicketComment)
            .options(selectinload(TicketComment.user))
            .where(TicketComment.ticket_id == ticket_id)
            .order_by(TicketComment.created_at.asc(), TicketComment.id.asc())
            .offset(offset)
            .limit(limit)
        )

        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def update(self, comment_id: int, comment: str) -> Optional[TicketComment]:
        """
        Replace a comment body and stamp updated_at.

        Args:
            comment_id: Comment ID
            comment: New body

        Returns:
            Updated comment, or None if not found
        """
        row = await self.get_by_id(comment_id)
        if row is None:
            return None

        row.comment = comment
        row.updated_at = utcnow()

        await self.session.flush()

        return await self.get_by_id(comment_id)

    async def delete(self, comment_id: int) -> bool:
        """
        Delete a comment.

        Returns:
            True if deleted, False if not found
        """
        if not is_valid_id(comment_id):
            return False
        result = await self.session.execute(
            delete(TicketComment).where(TicketComment.id == comment_id)
        )
        return result.rowcount > 0


class TicketStatusLogDAO:
    """
    Read access to the append-only status log.

    Rows are only written by TicketDAO.change_status.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_ticket(self, ticket_id: int) -> List[TicketStatusLog]:
        """
        List a ticket's status changes in the order they happened.

        Args:
            ticket_id: Ticket ID

        Returns:
            Log rows ordered by changed_at, then id, with the changing user
            loaded
        """
        query = (
            select(TicketStatusLog)
            .options(selectinload(TicketStatusLog.changed_by))
            .where(TicketStatusLog.ticket_id == ticket_id)
            .order_by(TicketStatusLog.changed_at.asc(), TicketStatusLog.id.asc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
