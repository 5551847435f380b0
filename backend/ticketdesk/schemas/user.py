"""
Pydantic schemas for user endpoints.

WHAT: Request/response schemas for user administration.

HOW: Role literals are validated in UserService so that a non-MANAGER
caller is refused before their input is judged; the schema only checks
shape (email format, non-empty name and password).
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from ticketdesk.models.user import UserRole


class UserCreate(BaseModel):
    """
    User creation request.

    role is accepted as a plain string and parsed strictly by the service.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(..., min_length=1, max_length=128, description="Plain-text password")
    role: str = Field(..., description="MANAGER, SUPPORT or USER")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v


class UserResponse(BaseModel):
    """
    User data returned by the API and embedded in tickets and comments.

    The password hash is never exposed.
    """

    id: int
    name: str
    email: str
    role: UserRole
    created_at: datetime

    class Config:
        from_attributes = True
