"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rolematrix import __version__
from rolematrix.api.router import api_router
from rolematrix.config import Settings, get_settings
from rolematrix.core.errors import register_exception_handlers
from rolematrix.core.logging import (
    RequestIdMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
)
from rolematrix.core.permissions import PermissionStore, build_store
from rolematrix.modules.permissions.services import PopupSessions
from rolematrix.modules.users.repos import UserRepository


logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Handles startup and shutdown events.
    """
    settings: Settings = app.state.settings
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    yield

    logger.info(
        "application_shutdown",
        open_popups=len(app.state.popup_sessions),
    )


def create_app(
    settings: Settings | None = None,
    store: PermissionStore | None = None,
    user_repo: UserRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The permission store is owned by the application and reachable from
    request handlers through ``app.state``.

    Args:
        settings: Settings to use instead of the cached environment settings
        store: Pre-built permission store, e.g. seeded by a test
        user_repo: Pre-populated user repository

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Role and permission matrix for ERP administration",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        # Disable docs in production
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.permission_store = store or build_store(settings)
    app.state.user_repo = user_repo or UserRepository()
    app.state.popup_sessions = PopupSessions(
        max_age=settings.popup_session_max_age_seconds,
        max_count=settings.popup_session_max_count,
    )

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    # Request logging runs inside the request ID middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # Register exception handlers for RFC 7807 error responses
    register_exception_handlers(app)

    app.include_router(api_router)

    return app
