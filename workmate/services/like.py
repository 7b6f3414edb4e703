"""Like service: directed edges and the denormalized user counters."""

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workmate.core.errors import ConflictError, NotFoundError, ValidationError
from workmate.models.like import Like
from workmate.models.user import User
from workmate.services import user as user_service

logger = structlog.get_logger()

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps the offset well inside a BIGINT
MAX_PAGE = 10_000


async def increment_counter(session: AsyncSession, user_id: UUID, column: str) -> None:
    """Atomically add one to a counter column (no read-modify-write)."""
    counter = getattr(User, column)
    await session.execute(
        update(User)
        .where(User.id == user_id)
        .values({counter: counter + 1})
        .execution_options(synchronize_session=False)
    )


async def decrement_counters(session: AsyncSession, user_ids: UUID | list[UUID], column: str) -> None:
    """Atomically subtract one from a counter column, never going below zero."""
    if isinstance(user_ids, UUID):
        user_ids = [user_ids]
    if not user_ids:
        return
    counter = getattr(User, column)
    await session.execute(
        update(User)
        .where(User.id.in_(user_ids), counter > 0)
        .values({counter: counter - 1})
        .execution_options(synchronize_session=False)
    )


async def is_liked(session: AsyncSession, from_user_id: UUID, to_user_id: UUID) -> bool:
    """Check if an edge exists from one user to another."""
    result = await session.execute(
        select(Like.id).where(
            Like.from_user_id == from_user_id,
            Like.to_user_id == to_user_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def like(
    session: AsyncSession,
    from_user: User,
    to_user_id: UUID,
) -> tuple[User, User]:
    """Create a like edge and bump both counters in the same transaction.

    Raises:
        ValidationError: from and to are the same user.
        NotFoundError: target user does not exist.
        ConflictError: the edge already exists, including when a concurrent
            request inserted it first and the unique constraint rejected ours.

    Returns:
        Tuple of (from_user, to_user) refreshed with the new counters.
    """
    if from_user.id == to_user_id:
        raise ValidationError("You cannot like yourself")

    to_user = await user_service.get_user_or_404(session, to_user_id)

    if await is_liked(session, from_user.id, to_user_id):
        raise ConflictError("User is already liked")

    session.add(Like(from_user_id=from_user.id, to_user_id=to_user_id))
    try:
        await session.flush()
    except IntegrityError as e:
        # Lost the race; caller's session rolls back, counters untouched
        logger.info(
            "Concurrent like rejected by unique constraint",
            from_user_id=str(from_user.id),
            to_user_id=str(to_user_id),
        )
        raise ConflictError("User is already liked") from e

    await increment_counter(session, from_user.id, "liked_count")
    await increment_counter(session, to_user_id, "liked_by_count")

    await session.refresh(from_user)
    await session.refresh(to_user)
    return from_user, to_user


async def unlike(
    session: AsyncSession,
    from_user: User,
    to_user_id: UUID,
) -> tuple[User, User | None]:
    """Remove a like edge and decrement both counters.

    Raises:
        ValidationError: from and to are the same user.
        NotFoundError: no such edge.
    """
    if from_user.id == to_user_id:
        raise ValidationError("You cannot unlike yourself")

    result = await session.execute(
        delete(Like)
        .where(
            Like.from_user_id == from_user.id,
            Like.to_user_id == to_user_id,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Like not found")

    await decrement_counters(session, from_user.id, "liked_count")
    await decrement_counters(session, to_user_id, "liked_by_count")

    await session.refresh(from_user)
    to_user = await user_service.get_user_by_id(session, to_user_id)
    if to_user is not None:
        await session.refresh(to_user)
    return from_user, to_user


async def _list_counterparts(
    session: AsyncSession,
    match_column,
    join_column,
    user_id: UUID,
    page: int,
    limit: int,
) -> tuple[list[tuple[datetime, User]], bool]:
    skip = (page - 1) * limit
    result = await session.execute(
        select(Like.created_at, User)
        .join(User, User.id == join_column)
        .where(match_column == user_id)
        .order_by(Like.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    entries = [(liked_at, user) for liked_at, user in result.all()]
    # Full page means "maybe more"; no separate count query
    has_more = len(entries) == limit
    return entries, has_more


async def get_liked_users(
    session: AsyncSession,
    user_id: UUID,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> tuple[list[tuple[datetime, User]], bool]:
    """Users this user liked, most recent first.

    Returns tuple of ([(liked_at, user)], has_more).
    """
    return await _list_counterparts(
        session, Like.from_user_id, Like.to_user_id, user_id, page, limit
    )


async def get_liked_by_users(
    session: AsyncSession,
    user_id: UUID,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> tuple[list[tuple[datetime, User]], bool]:
    """Users who liked this user, most recent first."""
    return await _list_counterparts(
        session, Like.to_user_id, Like.from_user_id, user_id, page, limit
    )


async def recount_counters(session: AsyncSession, user_id: UUID | None = None) -> int:
    """Recompute liked_count/liked_by_count from the edge table.

    Repairs drift left by earlier failures. Limited to one user when
    ``user_id`` is given. Returns the number of user rows updated.
    """
    given = (
        select(func.count(Like.id))
        .where(Like.from_user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    received = (
        select(func.count(Like.id))
        .where(Like.to_user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    stmt = update(User).values(liked_count=given, liked_by_count=received)
    if user_id is not None:
        stmt = stmt.where(User.id == user_id)

    result = await session.execute(stmt.execution_options(synchronize_session=False))
    logger.info("Like counters recounted", users=result.rowcount)
    return result.rowcount
