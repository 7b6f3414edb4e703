"""Work place endpoints."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, status

from workmate.core.database import AsyncSessionDep
from workmate.core.deps import CurrentUser
from workmate.core.observability import record_workplace_operation
from workmate.models.user import User
from workmate.models.workplace import WorkPlace
from workmate.schemas.common import MessageResponse, error_responses
from workmate.schemas.user import UserPublic
from workmate.schemas.workplace import (
    NoteCreate,
    WorkPlaceCreate,
    WorkPlaceListResponse,
    WorkPlaceResponse,
    WorkPlaceUpdate,
    WorkPlaceWithOwner,
    WorkPlaceWithOwnerListResponse,
)
from workmate.services import workplace_service

logger = structlog.get_logger()

router = APIRouter(
    prefix="/workplace",
    tags=["workplaces"],
    responses=error_responses(400, 401, 403, 404),
)


def _with_owner(workplace: WorkPlace, owner: User) -> WorkPlaceWithOwner:
    return WorkPlaceWithOwner(
        **WorkPlaceResponse.model_validate(workplace).model_dump(),
        owner=UserPublic.model_validate(owner),
    )


@router.post("", response_model=WorkPlaceResponse, status_code=status.HTTP_201_CREATED)
async def create_workplace(
    data: WorkPlaceCreate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> WorkPlaceResponse:
    """Register a new work place owned by the current user."""
    workplace = await workplace_service.create_workplace(session, user.id, data)
    await session.commit()

    logger.info("Work place created", workplace_id=str(workplace.id), user_id=str(user.id))
    record_workplace_operation("create")
    return WorkPlaceResponse.model_validate(workplace)


@router.get("", response_model=WorkPlaceListResponse)
async def list_own_workplaces(user: CurrentUser, session: AsyncSessionDep) -> WorkPlaceListResponse:
    workplaces = await workplace_service.list_own(session, user.id)
    return WorkPlaceListResponse(
        work_places=[WorkPlaceResponse.model_validate(wp) for wp in workplaces],
    )


@router.get("/all", response_model=WorkPlaceWithOwnerListResponse)
async def list_all_workplaces(session: AsyncSessionDep) -> WorkPlaceWithOwnerListResponse:
    """Every work place with a public view of its owner. No login needed."""
    rows = await workplace_service.list_all_with_owners(session)
    return WorkPlaceWithOwnerListResponse(
        work_places=[_with_owner(wp, owner) for wp, owner in rows],
    )


@router.get("/nearby", response_model=WorkPlaceWithOwnerListResponse)
async def nearby_workplaces(
    session: AsyncSessionDep,
    latitude: Annotated[float, Query()],
    longitude: Annotated[float, Query()],
    radius: Annotated[float, Query(gt=0, le=1)] = workplace_service.DEFAULT_SEARCH_RADIUS,
) -> WorkPlaceWithOwnerListResponse:
    """Work places inside a lat/lng box of +/- radius degrees."""
    rows = await workplace_service.find_by_location(session, latitude, longitude, radius)
    return WorkPlaceWithOwnerListResponse(
        work_places=[_with_owner(wp, owner) for wp, owner in rows],
    )


@router.patch("/{workplace_id}", response_model=WorkPlaceResponse)
async def update_workplace(
    workplace_id: UUID,
    data: WorkPlaceUpdate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> WorkPlaceResponse:
    workplace = await workplace_service.get_owned_workplace(session, workplace_id, user.id)
    workplace = await workplace_service.update_workplace(session, workplace, data)
    await session.commit()
    record_workplace_operation("update")
    return WorkPlaceResponse.model_validate(workplace)


@router.post(
    "/{workplace_id}/notes",
    response_model=WorkPlaceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_note(
    workplace_id: UUID,
    note: NoteCreate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> WorkPlaceResponse:
    """Append a note to a work place's log."""
    workplace = await workplace_service.get_owned_workplace(session, workplace_id, user.id)
    workplace = await workplace_service.add_note(session, workplace, note)
    await session.commit()
    record_workplace_operation("note")
    return WorkPlaceResponse.model_validate(workplace)


@router.delete("/{workplace_id}", response_model=MessageResponse)
async def delete_workplace(
    workplace_id: UUID,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> MessageResponse:
    """Delete a work place. Only its owner may do this."""
    await workplace_service.delete_workplace(session, workplace_id, user.id)
    await session.commit()

    logger.info("Work place deleted", workplace_id=str(workplace_id), user_id=str(user.id))
    record_workplace_operation("delete")
    return MessageResponse(message="Work place deleted")
