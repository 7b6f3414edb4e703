"""Account endpoints: join, check, profile, logout and deletion."""

import structlog
from fastapi import APIRouter, Response

from workmate.core.database import AsyncSessionDep
from workmate.core.deps import (
    CurrentAuth,
    CurrentUser,
    CurrentUserOptional,
    clear_auth_cookie,
    set_auth_cookie,
)
from workmate.core.errors import AuthenticationError
from workmate.core.observability import record_account_deletion, record_login
from workmate.schemas.common import MessageResponse, error_responses
from workmate.schemas.user import (
    AuthStatusResponse,
    CheckResponse,
    JoinResponse,
    MeResponse,
    UserCheck,
    UserJoin,
    UserResponse,
    UserSummary,
    UserUpdate,
)
from workmate.services import account_service, user_service

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"], responses=error_responses(400, 401, 409))


@router.post("/join", response_model=JoinResponse)
async def join(
    user_data: UserJoin,
    response: Response,
    session: AsyncSessionDep,
) -> JoinResponse:
    """Create an account from the join form and sign it in.

    A join carrying a GitHub or Google id signs in the matching account
    instead of failing when it already exists.
    """
    user, created = await user_service.join(session, user_data)
    await session.commit()

    set_auth_cookie(response, user.id)
    logger.info("User joined", user_id=str(user.id), created=created)
    record_login("join")

    return JoinResponse(
        message="Account created" if created else "Signed in",
        user=UserSummary.model_validate(user),
    )


@router.post("/check", response_model=CheckResponse)
async def check(
    lookup: UserCheck,
    response: Response,
    session: AsyncSessionDep,
) -> CheckResponse:
    """Look up an account by email, GitHub id or Google id.

    Signs the account in when it exists.
    """
    user = await user_service.check(session, lookup)
    if user is None:
        return CheckResponse(exists=False)

    await session.commit()
    set_auth_cookie(response, user.id)
    record_login("check")
    return CheckResponse(exists=True, user=UserSummary.model_validate(user))


@router.get("/me", response_model=MeResponse)
async def get_current_user_info(user: CurrentUserOptional) -> MeResponse:
    """Get the current authenticated user's information."""
    if user is None:
        raise AuthenticationError("Not authenticated")
    return MeResponse(user=UserResponse.model_validate(user))


@router.get("/status", response_model=AuthStatusResponse)
async def auth_status(auth: CurrentAuth) -> AuthStatusResponse:
    """Check authentication status.

    Returns user info if authenticated, otherwise returns authenticated: false.
    Useful for frontend to check login state without 401 errors.
    """
    if auth.is_authenticated:
        return AuthStatusResponse(
            authenticated=True,
            user=UserResponse.model_validate(auth.user),
        )
    return AuthStatusResponse(authenticated=False)


@router.put("/update", response_model=MeResponse)
async def update_profile(
    user_data: UserUpdate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> MeResponse:
    """Partially update the current user's profile."""
    user = await user_service.update_user(session, user, user_data)
    await session.commit()
    logger.info("Profile updated", user_id=str(user.id))
    return MeResponse(user=UserResponse.model_validate(user))


@router.delete("/delete", response_model=MessageResponse)
async def delete_account(
    response: Response,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> MessageResponse:
    """Delete the current account with its likes, work places and messages."""
    await account_service.delete_account(session, user.id)
    await session.commit()

    clear_auth_cookie(response)
    record_account_deletion()
    return MessageResponse(message="Account deleted")


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response) -> MessageResponse:
    """Log out the current user by clearing the auth cookie."""
    clear_auth_cookie(response)
    return MessageResponse(message="Logged out successfully")
