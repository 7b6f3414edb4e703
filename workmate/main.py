"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from workmate.api.router import router
from workmate.core.config import get_settings
from workmate.core.database import Database, database_from_settings
from workmate.core.errors import register_exception_handlers
from workmate.core.middleware import RequestTimeoutMiddleware, SecurityHeadersMiddleware
from workmate.core.oauth import OAuthProvider, build_oauth_registry
from workmate.core.observability import (
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    setup_observability,
)

settings = get_settings()

# Get logger (will be configured by setup_observability)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Work Mate API", version=settings.app_version)
    await app.state.db.connect()
    yield
    logger.info("Shutting down Work Mate API")
    await app.state.db.close()


def create_app(
    database: Database | None = None,
    oauth_providers: dict[str, OAuthProvider] | None = None,
) -> FastAPI:
    """Build the application.

    Tests pass their own ``database`` and ``oauth_providers``; the defaults
    come from settings.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Coworker matching: profiles, likes, messages and work places",
        lifespan=lifespan,
    )
    app.state.db = database if database is not None else database_from_settings(settings)
    app.state.oauth_providers = (
        oauth_providers if oauth_providers is not None else build_oauth_registry(settings)
    )

    # Set up observability (logging, tracing, metrics, Sentry)
    setup_observability(app)
    register_exception_handlers(app)

    # Middleware stack: the last one added is the outermost

    # Time budget for the handler and everything inside it
    app.add_middleware(
        RequestTimeoutMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
    )

    # Session middleware (required for OAuth state storage)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie="workmate_session",
        max_age=600,  # 10 minutes for the OAuth round trip
        same_site="lax",
        https_only=settings.cookie_secure,
    )

    app.add_middleware(
        SecurityHeadersMiddleware,
        enable_hsts=settings.is_production,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Outermost so that error responses carry CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {"message": "Welcome to Work Mate API", "version": settings.app_version}

    return app


app = create_app()
