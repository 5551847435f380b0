"""
Middleware package.

WHY: Middleware provides cross-cutting concerns (request ids, request
logging) that apply to all requests.
"""

from ticketdesk.middleware.request_context import (
    RequestContextMiddleware,
    RequestContext,
    get_request_context,
    get_client_ip,
    REQUEST_ID_HEADER,
)

__all__ = [
    "RequestContextMiddleware",
    "RequestContext",
    "get_request_context",
    "get_client_ip",
    "REQUEST_ID_HEADER",
]
