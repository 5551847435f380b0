"""
Pydantic schemas for comment endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ticketdesk.schemas.user import UserResponse


class CommentCreate(BaseModel):
    """
    Comment creation or edit request.

    Blank bodies are rejected by the comment rules with the same message
    whichever endpoint receives them.
    """

    comment: str = Field(..., max_length=10000, description="Comment body")


class CommentUpdate(CommentCreate):
    """Comment edit request."""


class CommentResponse(BaseModel):
    """Comment data for API responses."""

    id: int
    ticket_id: int
    user: UserResponse
    comment: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    is_edited: bool = False

    class Config:
        from_attributes = True
