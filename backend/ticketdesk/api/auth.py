"""
Authentication API endpoints.

WHAT: Login endpoint issuing JWT access tokens.

WHY: Every other endpoint requires a bearer token. Tokens carry the user's
id (sub), email and role and are trusted for their lifetime without a
database lookup.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.config import settings
from ticketdesk.db.session import get_db
from ticketdesk.schemas.auth import LoginRequest, TokenResponse
from ticketdesk.schemas.user import UserResponse
from ticketdesk.services.user_service import UserService


router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate with email and password to receive a JWT access token",
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> TokenResponse:
    """
    Authenticate user and return JWT access token.

    Unknown emails and wrong passwords get the same 401 so the endpoint
    does not reveal which accounts exist.

    Args:
        credentials: Login credentials (email + password)
        db: Database session

    Returns:
        JWT access token, its lifetime and the user it belongs to

    Raises:
        AuthenticationError (401): If credentials are invalid
    """
    user, token = await UserService(db).authenticate(credentials.email, credentials.password)

    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=settings.JWT_EXPIRATION_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )
