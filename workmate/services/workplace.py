"""WorkPlace service for owned, geo-tagged places and their note logs."""

from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from workmate.core.database import utcnow
from workmate.core.errors import AuthorizationError, NotFoundError
from workmate.models.user import User
from workmate.models.workplace import WorkPlace
from workmate.schemas.workplace import NoteCreate, WorkPlaceCreate, WorkPlaceUpdate

# Default half-width of the nearby bounding box, in degrees (~1.1 km of latitude)
DEFAULT_SEARCH_RADIUS = 0.01


def _note_entry(note: NoteCreate) -> dict[str, Any]:
    date = note.date or utcnow()
    return {"date": date.isoformat(), "content": note.content}


async def create_workplace(
    session: AsyncSession,
    owner_id: UUID,
    data: WorkPlaceCreate,
) -> WorkPlace:
    """Create a new work place with an optional initial note log."""
    workplace = WorkPlace(
        user_id=owner_id,
        name=data.name,
        latitude=data.latitude,
        longitude=data.longitude,
        notes=[_note_entry(note) for note in data.notes],
    )
    session.add(workplace)
    await session.flush()
    await session.refresh(workplace)
    return workplace


async def get_workplace_by_id(session: AsyncSession, workplace_id: UUID) -> WorkPlace | None:
    result = await session.execute(select(WorkPlace).where(WorkPlace.id == workplace_id))
    return result.scalar_one_or_none()


async def get_owned_workplace(
    session: AsyncSession,
    workplace_id: UUID,
    requester_id: UUID,
) -> WorkPlace:
    """Get a work place that the requester owns.

    Raises NotFoundError if it does not exist and AuthorizationError if it
    belongs to someone else.
    """
    workplace = await get_workplace_by_id(session, workplace_id)
    if workplace is None:
        raise NotFoundError("Work place not found")
    if workplace.user_id != requester_id:
        raise AuthorizationError("You do not have permission to modify this work place")
    return workplace


async def update_workplace(
    session: AsyncSession,
    workplace: WorkPlace,
    data: WorkPlaceUpdate,
) -> WorkPlace:
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(workplace, field, value)
    await session.flush()
    await session.refresh(workplace)
    return workplace


async def add_note(
    session: AsyncSession,
    workplace: WorkPlace,
    note: NoteCreate,
) -> WorkPlace:
    """Append a note to the end of the log."""
    # Assign a new list so the JSON column is flagged dirty
    workplace.notes = [*workplace.notes, _note_entry(note)]
    await session.flush()
    await session.refresh(workplace)
    return workplace


async def delete_workplace(
    session: AsyncSession,
    workplace_id: UUID,
    requester_id: UUID,
) -> None:
    workplace = await get_owned_workplace(session, workplace_id, requester_id)
    await session.delete(workplace)
    await session.flush()


async def list_own(session: AsyncSession, owner_id: UUID) -> list[WorkPlace]:
    """Work places owned by a user, newest first."""
    result = await session.execute(
        select(WorkPlace)
        .where(WorkPlace.user_id == owner_id)
        .order_by(WorkPlace.created_at.desc())
    )
    return list(result.scalars().all())


async def list_all_with_owners(session: AsyncSession) -> list[tuple[WorkPlace, User]]:
    """Every work place joined with its owner."""
    result = await session.execute(
        select(WorkPlace, User)
        .join(User, User.id == WorkPlace.user_id)
        .order_by(WorkPlace.created_at.desc())
    )
    return [(workplace, owner) for workplace, owner in result.all()]


async def find_by_location(
    session: AsyncSession,
    latitude: float,
    longitude: float,
    radius: float = DEFAULT_SEARCH_RADIUS,
) -> list[tuple[WorkPlace, User]]:
    """Work places inside a square box of +/- radius degrees.

    This is a bounding box on raw degrees, not a geodesic distance.
    """
    result = await session.execute(
        select(WorkPlace, User)
        .join(User, User.id == WorkPlace.user_id)
        .where(
            WorkPlace.latitude.between(latitude - radius, latitude + radius),
            WorkPlace.longitude.between(longitude - radius, longitude + radius),
        )
        .order_by(WorkPlace.created_at.desc())
    )
    return [(workplace, owner) for workplace, owner in result.all()]


async def delete_workplaces_for_user(session: AsyncSession, owner_id: UUID) -> int:
    result = await session.execute(
        delete(WorkPlace)
        .where(WorkPlace.user_id == owner_id)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
