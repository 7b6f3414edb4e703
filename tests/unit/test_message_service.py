"""Unit tests for direct messages."""

from uuid import uuid4

import pytest

from workmate.core.errors import AuthorizationError, NotFoundError, ValidationError
from workmate.schemas.message import MessageCreate
from workmate.services import message_service


def compose(target_id, subject: str = "Coffee?", content: str = "Want to cowork on Friday?"):
    return MessageCreate(target_user_id=target_id, subject=subject, content=content)


class TestSendMessage:
    """Tests for sending messages."""

    async def test_snapshots_target_email(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")

        message = await message_service.send_message(session, alice, compose(bob.id))

        assert message.from_user_id == alice.id
        assert message.target_user_id == bob.id
        assert message.to_user_email == "bob@x.com"
        assert message.is_read is False
        assert message.read_at is None

    async def test_cannot_message_self(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")

        with pytest.raises(ValidationError):
            await message_service.send_message(session, alice, compose(alice.id))

    async def test_unknown_target_is_not_found(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")

        with pytest.raises(NotFoundError):
            await message_service.send_message(session, alice, compose(uuid4()))


class TestReadingMessages:
    """Tests for listings, single reads and read receipts."""

    async def test_inbox_and_outbox_newest_first(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")
        await message_service.send_message(session, alice, compose(bob.id, subject="first"))
        await message_service.send_message(session, alice, compose(bob.id, subject="second"))

        received = await message_service.get_received(session, bob.id)
        sent = await message_service.get_sent(session, alice.id)

        assert [m.subject for m in received] == ["second", "first"]
        assert [m.subject for m in sent] == ["second", "first"]
        assert await message_service.get_received(session, alice.id) == []

    async def test_only_participants_can_read(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")
        eve = await user_factory("eve@x.com", "Eve")
        message = await message_service.send_message(session, alice, compose(bob.id))

        for reader in (alice, bob):
            found = await message_service.get_message_for_participant(
                session, message.id, reader.id
            )
            assert found.id == message.id

        with pytest.raises(AuthorizationError):
            await message_service.get_message_for_participant(session, message.id, eve.id)

        with pytest.raises(NotFoundError):
            await message_service.get_message_for_participant(session, uuid4(), alice.id)

    async def test_mark_as_read_is_target_only_and_idempotent(
        self, session, user_factory
    ) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")
        message = await message_service.send_message(session, alice, compose(bob.id))

        with pytest.raises(AuthorizationError):
            await message_service.mark_as_read(session, message.id, alice.id)

        read = await message_service.mark_as_read(session, message.id, bob.id)
        assert read.is_read is True
        first_read_at = read.read_at
        assert first_read_at is not None

        again = await message_service.mark_as_read(session, message.id, bob.id)
        assert again.read_at == first_read_at

    async def test_mark_missing_message_is_not_found(self, session, user_factory) -> None:
        bob = await user_factory("bob@x.com", "Bob")

        with pytest.raises(NotFoundError):
            await message_service.mark_as_read(session, uuid4(), bob.id)
