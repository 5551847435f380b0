"""
User Data Access Object.

WHY: UserDAO provides database operations for the User model. Email
uniqueness is checked up front for a clear error and enforced again by the
unique constraint, which is the only check that holds under concurrent
inserts.
"""

from typing import List, Optional, Tuple
from sqlalchemy import select, update, func, or_, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.dao.base import BaseDAO
from ticketdesk.models.user import User, UserRole
from ticketdesk.models.ticket import Ticket, TicketComment, TicketStatusLog
from ticketdesk.core.exceptions import DuplicateEmailError, ResourceInUseError


def normalize_email(email: str) -> str:
    """Canonical stored form of an email address."""
    return email.strip().lower()


class UserDAO(BaseDAO[User]):
    """
    Data Access Object for User model.
    """

    def __init__(self, model: type[User], session: AsyncSession):
        """Initialize UserDAO with model and session."""
        super().__init__(model, session)

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Retrieve user by email address.

        Comparison is case-insensitive so USER@EXAMPLE.COM finds the row
        stored as user@example.com.

        Args:
            email: User's email address

        Returns:
            User instance if found, None otherwise

        Example:
            >>> user = await user_dao.get_by_email("manager@example.com")
            >>> user.email
            'manager@example.com'
        """
        result = await self.session.execute(
            select(User).where(func.lower(User.email) == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """
        Check if email already exists in database.

        Args:
            email: Email address to check

        Returns:
            True if email exists, False otherwise
        """
        result = await self.session.execute(
            select(User.id).where(func.lower(User.email) == normalize_email(email)).limit(1)
        )
        return result.scalar_one_or_none() is not None

    async def create_user(
        self,
        email: str,
        hashed_password: str,
        name: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        Create a new user.

        Args:
            email: User's email address (stored lower-cased)
            hashed_password: Already hashed password (use hash_password())
            name: User's display name
            role: One of MANAGER, SUPPORT, USER

        Returns:
            Created User instance

        Raises:
            DuplicateEmailError: If the email is already registered, whether
                seen by the pre-check or by the unique constraint

        Example:
            >>> from ticketdesk.core.auth import hash_password
            >>> user = await user_dao.create_user(
            ...     email="agent@example.com",
            ...     hashed_password=hash_password("Secret123!"),
            ...     name="Agent",
            ...     role=UserRole.SUPPORT,
            ... )
        """
        email = normalize_email(email)

        if await self.email_exists(email):
            raise DuplicateEmailError(email=email)

        user = User(
            email=email,
            hashed_password=hashed_password,
            name=name,
            role=role,
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            # Lost the race against a concurrent insert of the same email
            raise DuplicateEmailError(email=email)

        await self.session.refresh(user)
        return user

    async def list_users(
        self,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """
        List users ordered by id with optional filters.

        Args:
            role: Only users holding this role
            search: Case-insensitive substring of name or email
            offset: Rows to skip
            limit: Rows to return

        Returns:
            Tuple of (users on this page, total matching users)
        """
        conditions = []
        if role is not None:
            conditions.append(User.role == role)
        if search:
            term = search.strip().lower()
            conditions.append(
                or_(
                    func.lower(User.name).contains(term, autoescape=True),
                    func.lower(User.email).contains(term, autoescape=True),
                )
            )

        count_query = select(func.count(User.id)).where(*conditions)
        total = (await self.session.execute(count_query)).scalar_one()
        if offset >= total:
            return [], total

        list_query = (
            select(User).where(*conditions).order_by(User.id).offset(offset).limit(limit)
        )
        result = await self.session.execute(list_query)
        return list(result.scalars().all()), total

    async def is_referenced(self, user_id: int) -> bool:
        """
        Check whether tickets, comments or status logs point at a user.

        Assignments do not count; they are cleared when the user goes.
        """
        query = select(
            or_(
                exists().where(Ticket.created_by_user_id == user_id),
                exists().where(TicketComment.user_id == user_id),
                exists().where(TicketStatusLog.changed_by_user_id == user_id),
            )
        )
        return bool((await self.session.execute(query)).scalar())

    async def delete_user(self, user_id: int) -> bool:
        """
        Hard-delete a user.

        Tickets assigned to the user become unassigned.

        Args:
            user_id: User ID to delete

        Returns:
            True if deleted, False if not found

        Raises:
            ResourceInUseError: If the user created tickets or authored
                comments or status logs
        """
        user = await self.get_by_id(user_id)
        if user is None:
            return False

        if await self.is_referenced(user_id):
            raise ResourceInUseError(
                message="User is referenced by tickets, comments or status logs.",
                user_id=user_id,
            )

        await self.session.execute(
            update(Ticket)
            .where(Ticket.assigned_to_user_id == user_id)
            .values(assigned_to_user_id=None)
        )
        return await self.delete(user_id)
