"""
Custom exception hierarchy for structured error handling.

WHY: Every failure the ticket core can report maps to exactly one class
below, and every class carries its HTTP status code. Routers never build
error responses by hand; they let these exceptions propagate to the
handlers in ticketdesk.core.exception_handlers.

Taxonomy:
- AuthenticationError (401): no identity or an unusable one
- AuthorizationError (403): policy denial
- ResourceNotFoundError (404): id does not resolve
- ValidationError (400): malformed input, bad pagination bounds
- InvalidStateTransitionError / NoOpTransitionError (400): lifecycle violations
- InvalidAssigneeError (400): assignment target holds the USER role
- DuplicateEmailError (400): email uniqueness violation
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Base exception class for all application exceptions.

    All custom exceptions inherit from this class so a single handler can
    render them.
    """

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        **context: Any,
    ):
        """
        Initialize exception with message and context.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (overrides class default)
            **context: Additional context for debugging (filtered in to_dict)
        """
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for JSON response.

        Returns:
            Dictionary with error details (sensitive fields filtered out)
        """
        sensitive_fields = {"password", "token", "secret", "key", "api_key"}
        filtered_context = {
            k: v for k, v in self.context.items() if k.lower() not in sensitive_fields
        }

        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": filtered_context if filtered_context else None,
        }


# ============================================================================
# Authentication & Authorization Exceptions
# ============================================================================


class AuthenticationError(AppException):
    """
    Raised when the caller cannot be identified.

    Covers a missing bearer token, a token that fails verification, and a
    token whose claims do not describe a known user id and role.

    HTTP Status: 401 Unauthorized
    """

    status_code = 401
    default_message = "Authentication failed"


class TokenExpiredError(AuthenticationError):
    """
    Raised when JWT token has expired.

    HTTP Status: 401 Unauthorized
    """

    default_message = "Token has expired"


class TokenInvalidError(AuthenticationError):
    """
    Raised when JWT token is malformed or has invalid signature.

    HTTP Status: 401 Unauthorized
    """

    default_message = "Token is invalid"


class AuthorizationError(AppException):
    """
    Raised when the access policy denies an operation.

    The message names the missing permission, e.g.
    "Only MANAGER can delete tickets."

    HTTP Status: 403 Forbidden
    """

    status_code = 403
    default_message = "You do not have permission to perform this action"


# ============================================================================
# Validation & Input Exceptions
# ============================================================================


class ValidationError(AppException):
    """
    Raised when input validation fails.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    default_message = "Validation failed"


class InvalidPaginationError(ValidationError):
    """
    Raised when page or page_size fall outside their bounds.

    Always raised before any query is issued.

    HTTP Status: 400 Bad Request
    """

    default_message = "Invalid pagination parameters"


# ============================================================================
# Resource Exceptions
# ============================================================================


class ResourceNotFoundError(AppException):
    """
    Raised when a requested resource doesn't exist.

    HTTP Status: 404 Not Found
    """

    status_code = 404
    default_message = "Resource not found"


class TicketNotFoundError(ResourceNotFoundError):
    """Raised when a ticket id does not resolve."""

    default_message = "Ticket not found."


class CommentNotFoundError(ResourceNotFoundError):
    """Raised when a comment id does not resolve."""

    default_message = "Comment not found."


class UserNotFoundError(ResourceNotFoundError):
    """Raised when a user id does not resolve."""

    default_message = "User not found."


class ResourceAlreadyExistsError(AppException):
    """
    Raised when attempting to create a resource that already exists.

    HTTP Status: 409 Conflict
    """

    status_code = 409
    default_message = "Resource already exists"


class DuplicateEmailError(ResourceAlreadyExistsError):
    """
    Raised when a user is created with an email that is already registered.

    Reported as a 400 to match the rest of the request-level failures
    clients already handle.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    default_message = "Email is already in use."


class ResourceInUseError(AppException):
    """
    Raised when deleting a row that other rows still reference.

    Users who created tickets or authored comments or status logs cannot
    be hard-deleted.

    HTTP Status: 409 Conflict
    """

    status_code = 409
    default_message = "Resource is still referenced and cannot be deleted"


# ============================================================================
# Business Logic Exceptions
# ============================================================================


class BusinessRuleViolation(AppException):
    """
    Raised when a business rule is violated.

    HTTP Status: 400 Bad Request
    """

    status_code = 400
    default_message = "Business rule violation"


class InvalidStateTransitionError(BusinessRuleViolation):
    """
    Raised when a requested status is not the successor of the current one.

    Context carries current_status, requested_status and allowed_next
    ("none" once the ticket is CLOSED).

    HTTP Status: 400 Bad Request
    """

    default_message = "Invalid state transition"


class NoOpTransitionError(BusinessRuleViolation):
    """
    Raised when the requested status equals the current status.

    Kept apart from InvalidStateTransitionError so callers can report
    "already in status X" instead of a generic rejection.

    HTTP Status: 400 Bad Request
    """

    default_message = "Ticket is already in the requested status"


class InvalidAssigneeError(BusinessRuleViolation):
    """
    Raised when a ticket is assigned to a user holding the USER role.

    HTTP Status: 400 Bad Request
    """

    default_message = "Cannot assign ticket to a user with role USER."


class ConcurrentModificationError(AppException):
    """
    Raised when a compare-and-set update loses a race it cannot explain.

    HTTP Status: 409 Conflict
    """

    status_code = 409
    default_message = "The resource was modified concurrently"

