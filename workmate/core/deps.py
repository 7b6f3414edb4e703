"""Dependency injection utilities for FastAPI routes."""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Cookie, Depends, Response

from workmate.core.config import get_settings
from workmate.core.database import AsyncSessionDep
from workmate.core.errors import AuthenticationError
from workmate.core.security import (
    TokenData,
    create_cookie_token,
    decode_access_token,
    should_renew,
)
from workmate.models.user import User
from workmate.services import user_service

settings = get_settings()
logger = structlog.get_logger()

# Cookie name for auth token
AUTH_COOKIE_NAME = "auth_token"


@dataclass
class AuthContext:
    """Who is making the request, resolved once per request.

    ``user`` is None for anonymous requests (no cookie, bad or expired
    token, or a token whose user no longer exists).
    """

    user: User | None = None
    token: TokenData | None = None
    renewed: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def require_user(self) -> User:
        if self.user is None:
            raise AuthenticationError("Not authenticated")
        return self.user


def set_auth_cookie(response: Response, user_id: UUID) -> None:
    """Issue a fresh credential cookie for a user."""
    token_value, max_age = create_cookie_token(user_id)
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token_value,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


async def get_token_from_cookie(
    auth_token: Annotated[str | None, Cookie()] = None,
) -> str | None:
    """Extract auth token from httpOnly cookie."""
    return auth_token


async def get_auth_context(
    response: Response,
    session: AsyncSessionDep,
    token: Annotated[str | None, Depends(get_token_from_cookie)],
) -> AuthContext:
    """Resolve the credential cookie into an AuthContext.

    A token still inside its renewal window is re-issued with a new issue
    time, sliding the expiry forward. Never raises for bad credentials;
    routes that need a user go through get_current_user.
    """
    if token is None:
        return AuthContext()

    token_data = decode_access_token(token)
    if token_data is None:
        return AuthContext()

    user = await user_service.get_user_by_id(session, token_data.user_id)
    if user is None:
        return AuthContext(token=token_data)

    renewed = False
    if should_renew(token_data):
        set_auth_cookie(response, user.id)
        renewed = True
        logger.debug("Auth token renewed", user_id=str(user.id))

    return AuthContext(user=user, token=token_data, renewed=renewed)


async def get_current_user_optional(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> User | None:
    """Get current user from token if present, otherwise return None.

    Use this for routes that work with or without authentication.
    """
    return auth.user


async def get_current_user(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> User:
    """Get current authenticated user.

    Raises AuthenticationError (401) if not authenticated.
    Use this for protected routes.
    """
    return auth.require_user()


# Type aliases for dependency injection
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserOptional = Annotated[User | None, Depends(get_current_user_optional)]
