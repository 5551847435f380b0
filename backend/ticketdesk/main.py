"""
Main FastAPI application.

WHY: This is the entry point for the application. It configures logging,
middleware, routes and exception handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ticketdesk.api import auth, comments, tickets, users
from ticketdesk.core.config import settings
from ticketdesk.core.exception_handlers import register_exception_handlers
from ticketdesk.core.logging import configure_logging
from ticketdesk.middleware import RequestContextMiddleware


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Factory pattern allows tests to build an app and override its
    dependencies without touching the module-level instance.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Role-scoped support ticket API",
        version=settings.VERSION,
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
    )

    register_exception_handlers(app)

    # Request ids must exist before any handler logs.
    app.add_middleware(RequestContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["health"])
    async def health_check() -> dict:
        """
        Liveness check.

        Does not check authentication or database connectivity.
        """
        return {"status": "healthy", "version": settings.VERSION}

    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(users.router, prefix=settings.API_PREFIX)
    app.include_router(tickets.router, prefix=settings.API_PREFIX)
    app.include_router(comments.router, prefix=settings.API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    # For development only; in production run `uvicorn ticketdesk.main:app`.
    uvicorn.run(
        "ticketdesk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
