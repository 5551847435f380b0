"""
FastAPI dependencies for authentication.

WHY: Every protected route takes its caller from get_identity(), so token
handling is identical across the API and routers never read headers
themselves.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ticketdesk.core.auth import verify_token
from ticketdesk.core.exceptions import AuthenticationError
from ticketdesk.core.identity import Identity
from ticketdesk.db.session import get_db


# HTTP Bearer token security scheme
# Format: "Authorization: Bearer <token>"
# auto_error is off so a missing header is reported by our own 401 shape.
security = HTTPBearer(auto_error=False)


async def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """
    Resolve the caller from the bearer token.

    The token is trusted once verified: its sub and role claims become the
    Identity without a database lookup.

    Usage:
        @router.get("/tickets")
        async def list_tickets(identity: Identity = Depends(get_identity)):
            ...

    Args:
        credentials: Bearer token from the Authorization header

    Returns:
        Identity of the caller

    Raises:
        AuthenticationError: If the header is missing, the token fails
            verification, or its claims are unusable
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="Not authenticated")

    payload = verify_token(credentials.credentials)
    return Identity.from_claims(payload)


__all__ = ["get_identity", "get_db", "security"]
