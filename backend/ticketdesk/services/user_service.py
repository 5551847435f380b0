"""
User Service.

WHAT: Creates and lists users and authenticates logins.

WHY: User administration is MANAGER-only, and the role check always comes
before any input validation so a non-MANAGER learns nothing about the
request they were not allowed to make.

HOW: Coordinates UserDAO with the password and token helpers in
ticketdesk.core.auth.
"""

import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.auth import create_access_token, hash_password, verify_password
from ticketdesk.core.exceptions import AuthenticationError, ValidationError
from ticketdesk.core.identity import Identity
from ticketdesk.dao.user import UserDAO
from ticketdesk.models.user import User, UserRole
from ticketdesk.services import access_policy
from ticketdesk.services.pagination import Page, PageMeta, PageRequest

logger = logging.getLogger(__name__)

DEFAULT_USER_PAGE_SIZE = 10


def parse_role(value: object, case_insensitive: bool = False) -> UserRole:
    """
    Parse a role literal for a request.

    Args:
        value: Candidate role
        case_insensitive: Upper-case strings before matching (query filters)

    Returns:
        UserRole

    Raises:
        ValidationError: If the value is not MANAGER, SUPPORT or USER
    """
    candidate = value.upper() if case_insensitive and isinstance(value, str) else value
    role = UserRole.parse(candidate)
    if role is None:
        raise ValidationError(
            message="Invalid role. Allowed: MANAGER, SUPPORT, USER.",
            role=str(value),
        )
    return role


class UserService:
    """
    Service for user administration and login.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_dao = UserDAO(User, session)

    async def create_user(
        self,
        identity: Identity,
        name: str,
        email: str,
        password: str,
        role: object,
    ) -> User:
        """
        Create a user account.

        Args:
            identity: Verified caller (must be MANAGER)
            name: Display name
            email: Unique email, stored lower-cased
            password: Plain-text password, stored as a bcrypt hash
            role: MANAGER, SUPPORT or USER

        Returns:
            Created user

        Raises:
            AuthorizationError: If the caller is not a MANAGER
            ValidationError: If the role literal is unknown
            DuplicateEmailError: If the email is already registered
        """
        access_policy.ensure_can_create_user(identity)

        parsed_role = parse_role(role)

        user = await self.user_dao.create_user(
            email=email,
            hashed_password=hash_password(password),
            name=name.strip(),
            role=parsed_role,
        )

        logger.info(
            "User %s created with role %s by user %s",
            user.id,
            parsed_role.value,
            identity.user_id,
        )
        return user

    async def list_users(
        self,
        identity: Identity,
        page: int = 1,
        page_size: int = DEFAULT_USER_PAGE_SIZE,
        role: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Page[User]:
        """
        Return one page of users ordered by id.

        Args:
            identity: Verified caller (must be MANAGER)
            page: 1-based page number
            page_size: Users per page, 1..100
            role: Optional role filter, case-insensitive
            search: Optional substring of name or email

        Raises:
            AuthorizationError: If the caller is not a MANAGER
            InvalidPaginationError: If page or page_size is out of range
            ValidationError: If the role filter is unknown
        """
        access_policy.ensure_can_list_users(identity)

        request = PageRequest(page=page, page_size=page_size)

        role_filter = parse_role(role, case_insensitive=True) if role else None

        users, total = await self.user_dao.list_users(
            role=role_filter,
            search=search,
            offset=request.offset,
            limit=request.limit,
        )
        return Page(items=users, meta=PageMeta.build(request, total))

    async def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue an access token.

        Unknown emails and wrong passwords produce the same message.

        Args:
            email: Login email, any case
            password: Plain-text password

        Returns:
            Tuple of (user, signed JWT carrying sub, email and role)

        Raises:
            AuthenticationError: If the credentials do not match a user
        """
        user = await self.user_dao.get_by_email(email)

        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Failed login for %s", email)
            raise AuthenticationError(message="Invalid email or password.")

        token = create_access_token(
            {"sub": str(user.id), "email": user.email, "role": user.role.value}
        )

        logger.info("User %s logged in", user.id)
        return user, token
