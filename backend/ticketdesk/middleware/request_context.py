"""
Request context middleware.

WHAT: Middleware that gives every request an id, captures the client IP,
method and path, and makes them available for the whole request lifecycle.

WHY: Log lines written by services and DAOs carry the request id (see
ticketdesk.core.logging.RequestIdFilter), so one ticket operation can be
followed across layers.

HOW: Stores the context in request.state and in a ContextVar, and echoes
the id back in the X-Request-ID response header. An incoming X-Request-ID
is reused so ids can be propagated from an upstream proxy.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Optional, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass
class RequestContext:
    """
    Container for request-scoped context data.

    Fields:
    - request_id: Unique identifier for the request (for log correlation)
    - ip_address: Client's IP (considering proxies)
    - path: Request path
    - method: HTTP method (GET, POST, etc.)
    """

    request_id: str
    ip_address: str
    path: str
    method: str


_request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "request_context", default=None
)


def get_request_context() -> Optional[RequestContext]:
    """
    Get the current request context.

    Returns:
        RequestContext if within a request, None otherwise
    """
    return _request_context.get()


def get_client_ip(request: Request) -> str:
    """
    Extract the client IP address from a request.

    Checks headers in order:
    1. X-Real-IP
    2. X-Forwarded-For (first entry)
    3. request.client.host

    Args:
        request: The incoming request

    Returns:
        Client IP address as string
    """
    x_real_ip = request.headers.get("X-Real-IP")
    if x_real_ip:
        return x_real_ip.strip()

    x_forwarded_for = request.headers.get("X-Forwarded-For")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that captures and stores request context.

    Example:
        @router.get("/example")
        async def example(request: Request):
            ctx = get_request_context()
            logger.info("handling %s", ctx.request_id)
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request and add context.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response with request ID header added
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        context = RequestContext(
            request_id=request_id,
            ip_address=get_client_ip(request),
            path=request.url.path,
            method=request.method,
        )

        request.state.context = context
        token = _request_context.set(context)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id

            logger.info(
                "%s %s -> %s (%.1f ms)",
                context.method,
                context.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
            return response

        finally:
            _request_context.reset(token)
