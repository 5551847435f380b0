"""
Comment Service.

WHAT: Adds, lists, edits and deletes ticket comments.

HOW: Comment bodies are validated first, then the ticket or comment is
loaded, then the comment policy decides. Listing validates pagination
before touching the database.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.exceptions import CommentNotFoundError, TicketNotFoundError
from ticketdesk.core.identity import Identity
from ticketdesk.dao.ticket import TicketCommentDAO, TicketDAO
from ticketdesk.models.ticket import Ticket, TicketComment
from ticketdesk.services import comment_policy
from ticketdesk.services.pagination import Page, PageMeta, PageRequest

logger = logging.getLogger(__name__)

DEFAULT_COMMENT_PAGE_SIZE = 20


class CommentService:
    """
    Service for ticket comments.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ticket_dao = TicketDAO(session)
        self.comment_dao = TicketCommentDAO(session)

    async def _get_ticket(self, ticket_id: int) -> Ticket:
        ticket = await self.ticket_dao.get_by_id(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id=ticket_id)
        return ticket

    async def _get_comment(self, comment_id: int) -> TicketComment:
        comment = await self.comment_dao.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundError(comment_id=comment_id)
        return comment

    async def add_comment(self, identity: Identity, ticket_id: int, text: str) -> TicketComment:
        """
        Add a comment to a ticket the caller can see.

        Args:
            identity: Verified caller (becomes the author)
            ticket_id: Ticket to comment on
            text: Comment body

        Returns:
            Created comment

        Raises:
            ValidationError: If the body is blank
            TicketNotFoundError: If the ticket does not exist
            AuthorizationError: If the caller may not see the ticket
        """
        body = comment_policy.clean_comment_body(text)

        ticket = await self._get_ticket(ticket_id)
        comment_policy.ensure_can_add_comment(identity, ticket, ticket_id)

        comment = await self.comment_dao.create(
            ticket_id=ticket_id, user_id=identity.user_id, comment=body
        )
        logger.info(
            "Comment %s added to ticket %s by user %s", comment.id, ticket_id, identity.user_id
        )
        return comment

    async def list_comments(
        self,
        identity: Identity,
        ticket_id: int,
        page: int = 1,
        page_size: int = DEFAULT_COMMENT_PAGE_SIZE,
    ) -> Page[TicketComment]:
        """
        Return one page of a ticket's comments, oldest first.

        Raises:
            InvalidPaginationError: If page or page_size is out of range
            TicketNotFoundError: If the ticket does not exist
            AuthorizationError: If the caller may not see the ticket
        """
        request = PageRequest(page=page, page_size=page_size)

        ticket = await self._get_ticket(ticket_id)
        comment_policy.ensure_can_list_comments(identity, ticket, ticket_id)

        items, total = await self.comment_dao.list_for_ticket(
            ticket_id, offset=request.offset, limit=request.limit
        )
        return Page(items=items, meta=PageMeta.build(request, total))

    async def edit_comment(self, identity: Identity, comment_id: int, text: str) -> TicketComment:
        """
        Replace a comment's body.

        Raises:
            ValidationError: If the body is blank
            CommentNotFoundError: If the comment does not exist
            AuthorizationError: If the caller is neither author nor MANAGER
        """
        body = comment_policy.clean_comment_body(text)

        comment = await self._get_comment(comment_id)
        comment_policy.ensure_can_edit_comment(identity, comment, comment_id)

        updated = await self.comment_dao.update(comment_id, body)
        if updated is None:
            raise CommentNotFoundError(comment_id=comment_id)

        logger.info("Comment %s edited by user %s", comment_id, identity.user_id)
        return updated

    async def delete_comment(self, identity: Identity, comment_id: int) -> None:
        """
        Delete a comment.

        Raises:
            CommentNotFoundError: If the comment does not exist
            AuthorizationError: If the caller is neither author nor MANAGER
        """
        comment = await self._get_comment(comment_id)
        comment_policy.ensure_can_delete_comment(identity, comment, comment_id)

        await self.comment_dao.delete(comment_id)
        logger.info("Comment %s deleted by user %s", comment_id, identity.user_id)
