"""Message service for sending and reading direct messages."""

from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from workmate.core.database import utcnow
from workmate.core.errors import AuthorizationError, NotFoundError, ValidationError
from workmate.models.message import Message
from workmate.models.user import User
from workmate.schemas.message import MessageCreate
from workmate.services import user as user_service


async def send_message(
    session: AsyncSession,
    sender: User,
    message_data: MessageCreate,
) -> Message:
    """Create a message, snapshotting the target's current email."""
    if sender.id == message_data.target_user_id:
        raise ValidationError("You cannot send a message to yourself")

    target = await user_service.get_user_by_id(session, message_data.target_user_id)
    if target is None:
        raise NotFoundError("Recipient not found")

    message = Message(
        from_user_id=sender.id,
        target_user_id=target.id,
        to_user_email=target.email,
        subject=message_data.subject,
        content=message_data.content,
        is_read=False,
    )
    session.add(message)
    await session.flush()
    await session.refresh(message)
    return message


async def get_message_by_id(session: AsyncSession, message_id: UUID) -> Message | None:
    result = await session.execute(select(Message).where(Message.id == message_id))
    return result.scalar_one_or_none()


async def get_message_for_participant(
    session: AsyncSession,
    message_id: UUID,
    user_id: UUID,
) -> Message:
    """Get a message readable only by its sender or its target."""
    message = await get_message_by_id(session, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if user_id not in (message.from_user_id, message.target_user_id):
        raise AuthorizationError("You do not have access to this message")
    return message


async def get_received(session: AsyncSession, user_id: UUID) -> list[Message]:
    """Messages addressed to a user, newest first."""
    result = await session.execute(
        select(Message)
        .where(Message.target_user_id == user_id)
        .order_by(Message.created_at.desc())
    )
    return list(result.scalars().all())


async def get_sent(session: AsyncSession, user_id: UUID) -> list[Message]:
    """Messages sent by a user, newest first."""
    result = await session.execute(
        select(Message)
        .where(Message.from_user_id == user_id)
        .order_by(Message.created_at.desc())
    )
    return list(result.scalars().all())


async def mark_as_read(
    session: AsyncSession,
    message_id: UUID,
    user_id: UUID,
) -> Message:
    """Mark a message read. Only the target may do this.

    Marking an already read message again keeps the original read_at.
    """
    message = await get_message_by_id(session, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if message.target_user_id != user_id:
        raise AuthorizationError("Only the recipient can mark this message as read")

    if not message.is_read:
        message.is_read = True
        message.read_at = utcnow()
        await session.flush()
        await session.refresh(message)
    return message


async def delete_messages_for_user(session: AsyncSession, user_id: UUID) -> int:
    """Delete every message sent by or addressed to a user."""
    result = await session.execute(
        delete(Message)
        .where(or_(Message.from_user_id == user_id, Message.target_user_id == user_id))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
