"""
Caller identity consumed by the ticket core.

WHAT: The (user id, role) pair every operation is evaluated against.

WHY: The access policy, the lifecycle and the services never look at
credentials. They receive an Identity that has already been resolved from a
verified token, and they trust it completely.

HOW: Identity.from_claims() turns a decoded JWT payload into an Identity.
Any claim it cannot interpret exactly (missing or non-integer subject,
unknown role) is an authentication failure; nothing is defaulted.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from ticketdesk.core.exceptions import AuthenticationError
from ticketdesk.models.base import is_valid_id
from ticketdesk.models.user import UserRole


@dataclass(frozen=True)
class Identity:
    """
    Verified caller.

    Attributes:
        user_id: Id of the calling user
        role: Role of the calling user at token issue time
    """

    user_id: int
    role: UserRole

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    @property
    def is_support(self) -> bool:
        return self.role == UserRole.SUPPORT

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Identity":
        """
        Build an Identity from decoded token claims.

        Args:
            claims: Decoded JWT payload carrying "sub" and "role"

        Returns:
            Identity for the caller

        Raises:
            AuthenticationError: If the subject is not an integer id or the
                role is not one of MANAGER, SUPPORT, USER
        """
        subject = claims.get("sub")
        try:
            user_id = int(subject)
        except (TypeError, ValueError):
            raise AuthenticationError(message="Invalid token: missing or malformed subject")

        if not is_valid_id(user_id):
            raise AuthenticationError(message="Invalid token: missing or malformed subject")

        role = UserRole.parse(claims.get("role"))
        if role is None:
            raise AuthenticationError(
                message="Invalid token: unrecognized role",
                user_id=user_id,
            )

        return cls(user_id=user_id, role=role)
