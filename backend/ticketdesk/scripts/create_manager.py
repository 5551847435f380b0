"""
Create or promote the first MANAGER account.

Creating users through the API requires a MANAGER, so a fresh database
needs one seeded from the command line:

    python -m ticketdesk.scripts.create_manager admin@example.com 'S3cret!' --name Admin

An existing account with that email is promoted to MANAGER; its password
is only replaced when --reset-password is given.
"""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from ticketdesk.core.auth import hash_password
from ticketdesk.core.config import settings
from ticketdesk.core.logging import configure_logging
from ticketdesk.dao.user import UserDAO
from ticketdesk.db.session import AsyncSessionLocal, engine
from ticketdesk.models.user import User, UserRole

logger = logging.getLogger(__name__)


async def ensure_manager(
    db: AsyncSession,
    email: str,
    password: str,
    name: Optional[str] = None,
    reset_password: bool = False,
) -> User:
    """
    Make sure a MANAGER with this email exists.

    Args:
        db: Session to work in (committed by the caller)
        email: Manager email
        password: Password for a new account, or for --reset-password
        name: Display name; defaults to the part of the email before "@"
        reset_password: Replace the password of an existing account

    Returns:
        The created or updated user
    """
    user_dao = UserDAO(User, db)
    user = await user_dao.get_by_email(email)

    if user is None:
        user = await user_dao.create_user(
            email=email,
            hashed_password=hash_password(password),
            name=name or email.split("@")[0],
            role=UserRole.MANAGER,
        )
        logger.info("Created manager %s (id=%s)", user.email, user.id)
        return user

    changes = {}
    if user.role != UserRole.MANAGER:
        changes["role"] = UserRole.MANAGER
    if name and name != user.name:
        changes["name"] = name
    if reset_password:
        changes["hashed_password"] = hash_password(password)

    if changes:
        user = await user_dao.update(user.id, **changes)
        logger.info("Updated user %s: %s", user.email, ", ".join(sorted(changes)))
    else:
        logger.info("Manager %s already exists, nothing to do", user.email)

    return user


async def _run(args: argparse.Namespace) -> None:
    try:
        async with AsyncSessionLocal() as db:
            await ensure_manager(
                db,
                email=args.email,
                password=args.password,
                name=args.name,
                reset_password=args.reset_password,
            )
            await db.commit()
    finally:
        await engine.dispose()


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or promote a MANAGER account")
    parser.add_argument("email", help="Manager email address")
    parser.add_argument("password", help="Manager password")
    parser.add_argument("-n", "--name", default=None, help="Display name")
    parser.add_argument(
        "--reset-password",
        action="store_true",
        help="Replace the password if the account already exists",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if not args.password:
        raise SystemExit("error: password must not be empty")

    configure_logging(settings.LOG_LEVEL)
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
