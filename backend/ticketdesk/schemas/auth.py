"""
Pydantic schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field

from ticketdesk.schemas.user import UserResponse


class LoginRequest(BaseModel):
    """Login credentials."""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class TokenResponse(BaseModel):
    """
    Issued access token.

    Send it back as "Authorization: Bearer <access_token>".
    """

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse
