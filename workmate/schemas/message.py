"""Message Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from workmate.schemas.common import CamelModel

SUBJECT_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000


class MessageCreate(CamelModel):
    """Schema for POST /message/send."""

    target_user_id: UUID
    subject: str = Field(min_length=1, max_length=SUBJECT_MAX_LENGTH)
    content: str = Field(min_length=1, max_length=CONTENT_MAX_LENGTH)


class MessageOut(CamelModel):
    id: UUID
    from_user_id: UUID
    target_user_id: UUID
    to_user_email: str
    subject: str
    content: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class MessageListResponse(CamelModel):
    messages: list[MessageOut]
