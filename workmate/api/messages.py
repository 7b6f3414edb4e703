"""Direct message endpoints."""

from uuid import UUID

import structlog
from fastapi import APIRouter, status

from workmate.core.database import AsyncSessionDep
from workmate.core.deps import CurrentUser
from workmate.core.observability import record_message_operation
from workmate.schemas.common import error_responses
from workmate.schemas.message import MessageCreate, MessageListResponse, MessageOut
from workmate.services import message_service

logger = structlog.get_logger()

router = APIRouter(
    prefix="/message",
    tags=["messages"],
    responses=error_responses(400, 401, 403, 404),
)


@router.post("/send", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> MessageOut:
    """Send a message to another user."""
    message = await message_service.send_message(session, user, message_data)
    await session.commit()

    logger.info(
        "Message sent",
        message_id=str(message.id),
        user_id=str(user.id),
        target_user_id=str(message.target_user_id),
    )
    record_message_operation("send")
    return MessageOut.model_validate(message)


@router.get("/received", response_model=MessageListResponse)
async def received_messages(user: CurrentUser, session: AsyncSessionDep) -> MessageListResponse:
    messages = await message_service.get_received(session, user.id)
    return MessageListResponse(messages=[MessageOut.model_validate(m) for m in messages])


@router.get("/sent", response_model=MessageListResponse)
async def sent_messages(user: CurrentUser, session: AsyncSessionDep) -> MessageListResponse:
    messages = await message_service.get_sent(session, user.id)
    return MessageListResponse(messages=[MessageOut.model_validate(m) for m in messages])


@router.get("/{message_id}", response_model=MessageOut)
async def get_message(
    message_id: UUID,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> MessageOut:
    """Get a single message. Only its sender and target may read it."""
    message = await message_service.get_message_for_participant(session, message_id, user.id)
    return MessageOut.model_validate(message)


@router.patch("/{message_id}/read", response_model=MessageOut)
async def mark_message_read(
    message_id: UUID,
    user: CurrentUser,
    session: AsyncSessionDep,
) -> MessageOut:
    """Mark a received message as read."""
    message = await message_service.mark_as_read(session, message_id, user.id)
    await session.commit()
    record_message_operation("read")
    return MessageOut.model_validate(message)
