"""
Pydantic schemas for ticket endpoints.

WHAT: Request/response schemas for ticket management API.

WHY: Schemas define API contracts for ticket operations:
1. Validate incoming request data (lengths, priority literal)
2. Document API for OpenAPI/Swagger
3. Control which fields are exposed

HOW: Uses Pydantic v2 with Field validators and ORM mode for SQLAlchemy
integration. Status literals are left as strings here; the lifecycle
module parses them so an unknown status and an illegal transition are
reported by the same layer.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ticketdesk.models.ticket import TicketPriority, TicketStatus
from ticketdesk.schemas.user import UserResponse


# ============================================================================
# Ticket Schemas
# ============================================================================


class TicketCreate(BaseModel):
    """
    Ticket creation request.

    Priority defaults to MEDIUM and is accepted in any case.
    """

    title: str = Field(..., min_length=5, max_length=255, description="Ticket title")
    description: str = Field(..., min_length=10, description="Detailed description")
    priority: TicketPriority = Field(TicketPriority.MEDIUM, description="LOW, MEDIUM or HIGH")

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v):
        if v is None:
            return TicketPriority.MEDIUM
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be blank")
        return v


class TicketAssign(BaseModel):
    """Assignment request."""

    user_id: int = Field(..., gt=0, description="MANAGER or SUPPORT user to assign")


class TicketStatusUpdate(BaseModel):
    """Status change request."""

    status: str = Field(..., description="OPEN, IN_PROGRESS, RESOLVED or CLOSED")


class TicketResponse(BaseModel):
    """
    Ticket data for API responses.

    Creator and assignee are embedded as user objects.
    """

    id: int
    title: str
    description: str
    status: TicketStatus
    priority: TicketPriority
    created_by: UserResponse
    assigned_to: Optional[UserResponse] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Status Log Schemas
# ============================================================================


class StatusLogResponse(BaseModel):
    """One recorded status change."""

    id: int
    ticket_id: int
    old_status: TicketStatus
    new_status: TicketStatus
    changed_by: UserResponse
    changed_at: datetime

    class Config:
        from_attributes = True
