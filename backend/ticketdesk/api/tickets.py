"""
Ticket management API endpoints.

WHAT: RESTful API for support ticket operations.

WHY: Tickets move through OPEN -> IN_PROGRESS -> RESOLVED -> CLOSED with
every change recorded in a status log. Who may see, assign, move or delete
a ticket depends on role and on whether the caller created or is assigned
to it.

HOW: FastAPI router delegating to TicketService and CommentService. Route
handlers only translate between schemas and service calls; every rule is
enforced in the service layer.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.deps import get_identity
from ticketdesk.core.identity import Identity
from ticketdesk.db.session import get_db
from ticketdesk.schemas.comment import CommentCreate, CommentResponse
from ticketdesk.schemas.common import PaginatedResponse, PaginationMeta
from ticketdesk.schemas.ticket import (
    StatusLogResponse,
    TicketAssign,
    TicketCreate,
    TicketResponse,
    TicketStatusUpdate,
)
from ticketdesk.services.comment_service import DEFAULT_COMMENT_PAGE_SIZE, CommentService
from ticketdesk.services.ticket_service import TicketService


router = APIRouter(prefix="/tickets", tags=["tickets"])


# ============================================================================
# Ticket Endpoints
# ============================================================================


@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create ticket",
    description="Create a new support ticket (MANAGER or USER)",
)
async def create_ticket(
    data: TicketCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> TicketResponse:
    """
    Create a new support ticket.

    The ticket starts OPEN and unassigned, owned by the caller.

    Raises:
        AuthorizationError (403): If the caller is SUPPORT
    """
    ticket = await TicketService(db).create_ticket(
        identity,
        title=data.title,
        description=data.description,
        priority=data.priority,
    )
    return TicketResponse.model_validate(ticket)


@router.get(
    "",
    response_model=List[TicketResponse],
    status_code=status.HTTP_200_OK,
    summary="List tickets",
    description="Tickets visible to the caller, ordered by id",
)
async def list_tickets(
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> List[TicketResponse]:
    """
    List tickets.

    MANAGER sees every ticket, SUPPORT the tickets assigned to them, USER
    the tickets they created.
    """
    tickets = await TicketService(db).list_tickets(identity)
    return [TicketResponse.model_validate(ticket) for ticket in tickets]


@router.patch(
    "/{ticket_id}/assign",
    response_model=TicketResponse,
    status_code=status.HTTP_200_OK,
    summary="Assign ticket",
    description="Assign a ticket to a MANAGER or SUPPORT user",
)
async def assign_ticket(
    ticket_id: int,
    data: TicketAssign,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> TicketResponse:
    """
    Assign a ticket.

    Raises:
        TicketNotFoundError (404): If the ticket does not exist
        AuthorizationError (403): If the caller is a USER
        UserNotFoundError (404): If the target user does not exist
        InvalidAssigneeError (400): If the target user has role USER
    """
    ticket = await TicketService(db).assign_ticket(identity, ticket_id, data.user_id)
    return TicketResponse.model_validate(ticket)


@router.patch(
    "/{ticket_id}/status",
    response_model=TicketResponse,
    status_code=status.HTTP_200_OK,
    summary="Change ticket status",
    description="Move a ticket to the next status in its lifecycle",
)
async def update_ticket_status(
    ticket_id: int,
    data: TicketStatusUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> TicketResponse:
    """
    Change ticket status.

    Raises:
        ValidationError (400): If the status literal is unknown
        TicketNotFoundError (404): If the ticket does not exist
        AuthorizationError (403): If the caller may not move this ticket
        NoOpTransitionError (400): If the ticket is already in that status
        InvalidStateTransitionError (400): If the status is not the next one
    """
    ticket = await TicketService(db).update_status(identity, ticket_id, data.status)
    return TicketResponse.model_validate(ticket)


@router.get(
    "/{ticket_id}/status-logs",
    response_model=List[StatusLogResponse],
    status_code=status.HTTP_200_OK,
    summary="Ticket status history",
    description="Status changes of a ticket, oldest first",
)
async def list_status_logs(
    ticket_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> List[StatusLogResponse]:
    logs = await TicketService(db).list_status_logs(identity, ticket_id)
    return [StatusLogResponse.model_validate(log) for log in logs]


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete ticket",
    description="Delete a ticket with its comments and status logs (MANAGER only)",
)
async def delete_ticket(
    ticket_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Delete a ticket.

    Raises:
        TicketNotFoundError (404): If the ticket does not exist
        AuthorizationError (403): If the caller is not a MANAGER
    """
    await TicketService(db).delete_ticket(identity, ticket_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Comment Endpoints
# ============================================================================


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add comment",
    description="Comment on a ticket the caller can see",
)
async def add_comment(
    ticket_id: int,
    data: CommentCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    """
    Add a comment to a ticket.

    Raises:
        ValidationError (400): If the comment is blank
        TicketNotFoundError (404): If the ticket does not exist
        AuthorizationError (403): If the caller may not see the ticket
    """
    comment = await CommentService(db).add_comment(identity, ticket_id, data.comment)
    return CommentResponse.model_validate(comment)


@router.get(
    "/{ticket_id}/comments",
    response_model=PaginatedResponse[CommentResponse],
    status_code=status.HTTP_200_OK,
    summary="List comments",
    description="Paginated comments of a ticket, oldest first",
)
async def list_comments(
    ticket_id: int,
    page: int = Query(default=1, description="1-based page number"),
    page_size: int = Query(
        default=DEFAULT_COMMENT_PAGE_SIZE, description="Items per page, 1-100"
    ),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[CommentResponse]:
    """
    List comments on a ticket.

    Raises:
        InvalidPaginationError (400): If page or page_size is out of range
        TicketNotFoundError (404): If the ticket does not exist
        AuthorizationError (403): If the caller may not see the ticket
    """
    result = await CommentService(db).list_comments(
        identity, ticket_id, page=page, page_size=page_size
    )
    return PaginatedResponse[CommentResponse](
        data=[CommentResponse.model_validate(comment) for comment in result.items],
        pagination=PaginationMeta.from_meta(result.meta),
    )
