"""
User administration API endpoints.

Both endpoints are MANAGER-only. Non-MANAGER callers are refused before
their input is validated.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.deps import get_identity
from ticketdesk.core.identity import Identity
from ticketdesk.db.session import get_db
from ticketdesk.schemas.common import PaginatedResponse, PaginationMeta
from ticketdesk.schemas.user import UserCreate, UserResponse
from ticketdesk.services.user_service import DEFAULT_USER_PAGE_SIZE, UserService


router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create a MANAGER, SUPPORT or USER account (MANAGER only)",
)
async def create_user(
    data: UserCreate,
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """
    Create a user account.

    Raises:
        AuthorizationError (403): If the caller is not a MANAGER
        ValidationError (400): If the role is unknown
        DuplicateEmailError (400): If the email is taken
    """
    user = await UserService(db).create_user(
        identity,
        name=data.name,
        email=data.email,
        password=data.password,
        role=data.role,
    )
    return UserResponse.model_validate(user)


@router.get(
    "",
    response_model=PaginatedResponse[UserResponse],
    status_code=status.HTTP_200_OK,
    summary="List users",
    description="Paginated list of users ordered by id (MANAGER only)",
)
async def list_users(
    page: int = Query(default=1, description="1-based page number"),
    page_size: int = Query(default=DEFAULT_USER_PAGE_SIZE, description="Items per page, 1-100"),
    role: Optional[str] = Query(default=None, description="Filter by role"),
    search: Optional[str] = Query(default=None, description="Substring of name or email"),
    identity: Identity = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[UserResponse]:
    """
    List users.

    Raises:
        AuthorizationError (403): If the caller is not a MANAGER
        InvalidPaginationError (400): If page or page_size is out of range
    """
    result = await UserService(db).list_users(
        identity, page=page, page_size=page_size, role=role, search=search
    )
    return PaginatedResponse[UserResponse](
        data=[UserResponse.model_validate(user) for user in result.items],
        pagination=PaginationMeta.from_meta(result.meta),
    )
