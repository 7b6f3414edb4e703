"""Like graph endpoints, mounted under /auth."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Query

from workmate.core.database import AsyncSessionDep
from workmate.core.deps import CurrentUser
from workmate.core.observability import record_like_operation
from workmate.schemas.common import error_responses
from workmate.schemas.like import (
    LikeActionResponse,
    LikedUserEntry,
    LikedUserListResponse,
    LikeStatusResponse,
)
from workmate.schemas.user import LikedUserProfile
from workmate.services import like_service

logger = structlog.get_logger()

router = APIRouter(
    prefix="/auth",
    tags=["likes"],
    responses=error_responses(400, 401, 404, 409),
)

PageQuery = Annotated[int, Query(ge=1, le=like_service.MAX_PAGE)]
LimitQuery = Annotated[int, Query(ge=1, le=like_service.MAX_PAGE_SIZE)]


@router.post("/like/{target_user_id}", response_model=LikeActionResponse)
async def like_user(
    target_user_id: UUID,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> LikeActionResponse:
    """Like another user."""
    from_user, to_user = await like_service.like(session, user, target_user_id)
    await session.commit()

    logger.info("User liked", user_id=str(from_user.id), target_user_id=str(target_user_id))
    record_like_operation("like")
    return LikeActionResponse(
        message="User liked",
        liked_count=from_user.liked_count,
        target_liked_by_count=to_user.liked_by_count,
    )


@router.delete("/unlike/{target_user_id}", response_model=LikeActionResponse)
async def unlike_user(
    target_user_id: UUID,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> LikeActionResponse:
    """Remove a like from another user."""
    from_user, to_user = await like_service.unlike(session, user, target_user_id)
    await session.commit()

    logger.info("User unliked", user_id=str(from_user.id), target_user_id=str(target_user_id))
    record_like_operation("unlike")
    return LikeActionResponse(
        message="User unliked",
        liked_count=from_user.liked_count,
        target_liked_by_count=to_user.liked_by_count if to_user else 0,
    )


@router.get("/like-status/{target_user_id}", response_model=LikeStatusResponse)
async def like_status(
    target_user_id: UUID,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> LikeStatusResponse:
    return LikeStatusResponse(
        is_liked=await like_service.is_liked(session, user.id, target_user_id),
    )


def _listing(
    entries: list,
    page: int,
    limit: int,
    has_more: bool,
) -> LikedUserListResponse:
    return LikedUserListResponse(
        users=[
            LikedUserEntry(liked_at=liked_at, user=LikedUserProfile.model_validate(other))
            for liked_at, other in entries
        ],
        page=page,
        limit=limit,
        has_more=has_more,
    )


@router.get("/liked-users", response_model=LikedUserListResponse)
async def liked_users(
    user: CurrentUser,
    session: AsyncSessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = like_service.DEFAULT_PAGE_SIZE,
) -> LikedUserListResponse:
    """Users the current user liked, most recent first."""
    entries, has_more = await like_service.get_liked_users(session, user.id, page, limit)
    return _listing(entries, page, limit, has_more)


@router.get("/liked-by-users", response_model=LikedUserListResponse)
async def liked_by_users(
    user: CurrentUser,
    session: AsyncSessionDep,
    page: PageQuery = 1,
    limit: LimitQuery = like_service.DEFAULT_PAGE_SIZE,
) -> LikedUserListResponse:
    """Users who liked the current user, most recent first."""
    entries, has_more = await like_service.get_liked_by_users(session, user.id, page, limit)
    return _listing(entries, page, limit, has_more)
