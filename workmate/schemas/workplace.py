"""WorkPlace Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from workmate.schemas.common import CamelModel
from workmate.schemas.user import UserPublic

NOTE_MAX_LENGTH = 2000


class NoteCreate(CamelModel):
    """A note entry; ``date`` defaults to the time it is recorded."""

    content: str = Field(min_length=1, max_length=NOTE_MAX_LENGTH)
    date: datetime | None = None


class Note(CamelModel):
    date: datetime
    content: str


class WorkPlaceCreate(CamelModel):
    """Schema for POST /workplace. Coordinates are not range-checked."""

    name: str = Field(min_length=1, max_length=200)
    latitude: float
    longitude: float
    notes: list[NoteCreate] = Field(default_factory=list)


class WorkPlaceUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    latitude: float | None = None
    longitude: float | None = None


class WorkPlaceResponse(CamelModel):
    id: UUID
    user_id: UUID
    name: str
    latitude: float
    longitude: float
    notes: list[Note]
    created_at: datetime
    updated_at: datetime


class WorkPlaceWithOwner(WorkPlaceResponse):
    owner: UserPublic


class WorkPlaceListResponse(CamelModel):
    work_places: list[WorkPlaceResponse]


class WorkPlaceWithOwnerListResponse(CamelModel):
    work_places: list[WorkPlaceWithOwner]
