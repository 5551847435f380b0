"""
Comment moderation API endpoints.

Comments are edited or deleted by id; only their author or a MANAGER may
do either.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.deps import get_identity
from ticketdesk.core.identity import Identity
from ticketdesk.db.session import get_db
from ticketdesk.schemas.comment import CommentResponse, CommentUpdate
from ticketdesk.services.comment_service import CommentService


router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch(
    "/{comment_id}",
    response_model=CommentResponse,
    status_code=status.HTTP_200_OK,
    summary="Edit comment",
    description="Replace a comment's text (author or MANAGER)",
)
async def edit_comment(
    comment_id: int,
    data: CommentUpdate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> CommentResponse:
    comment = await CommentService(db).edit_comment(identity, comment_id, data.comment)
    return CommentResponse.model_validate(comment)


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete comment",
    description="Delete a comment (author or MANAGER)",
)
async def delete_comment(
    comment_id: int,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> Response:
    await CommentService(db).delete_comment(identity, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
