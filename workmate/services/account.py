"""Account deletion with cascade over likes, work places and messages."""

from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from workmate.models.like import Like
from workmate.services import like as like_service
from workmate.services import message as message_service
from workmate.services import user as user_service
from workmate.services import workplace as workplace_service

logger = structlog.get_logger()


@dataclass
class DeletionSummary:
    """Row counts removed by delete_account."""

    likes_given: int
    likes_received: int
    work_places: int
    messages: int


async def delete_account(session: AsyncSession, user_id: UUID) -> DeletionSummary:
    """Delete a user and everything that references them.

    Runs in the caller's transaction: either every step is committed or
    none is. Counterpart counters are decremented once per removed edge;
    the deleted user's own counters go away with the row.
    """
    user = await user_service.get_user_or_404(session, user_id)

    # Decrement from the rows this statement removed, not from an earlier
    # read: an edge unliked concurrently is no longer returned here
    removed = (
        await session.execute(
            delete(Like)
            .where(or_(Like.from_user_id == user_id, Like.to_user_id == user_id))
            .returning(Like.from_user_id, Like.to_user_id)
            .execution_options(synchronize_session=False)
        )
    ).all()
    liked_ids = [to_id for from_id, to_id in removed if from_id == user_id]
    liker_ids = [from_id for from_id, to_id in removed if to_id == user_id]

    # One edge per (from, to) pair, so each counterpart loses exactly one
    await like_service.decrement_counters(session, liked_ids, "liked_by_count")
    await like_service.decrement_counters(session, liker_ids, "liked_count")

    work_places = await workplace_service.delete_workplaces_for_user(session, user_id)
    messages = await message_service.delete_messages_for_user(session, user_id)

    await session.delete(user)
    await session.flush()

    summary = DeletionSummary(
        likes_given=len(liked_ids),
        likes_received=len(liker_ids),
        work_places=work_places,
        messages=messages,
    )
    logger.info(
        "Account deleted",
        user_id=str(user_id),
        likes_given=summary.likes_given,
        likes_received=summary.likes_received,
        work_places=summary.work_places,
        messages=summary.messages,
    )
    return summary
