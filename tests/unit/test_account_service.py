"""Unit tests for account deletion and its cascade."""

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy import func, or_, select

from workmate.core.database import Database
from workmate.core.errors import NotFoundError
from workmate.models.like import Like
from workmate.models.message import Message
from workmate.models.user import User
from workmate.models.workplace import WorkPlace
from workmate.schemas.message import MessageCreate
from workmate.schemas.user import IdentityDescriptor
from workmate.schemas.workplace import WorkPlaceCreate
from workmate.services import (
    account_service,
    like_service,
    message_service,
    user_service,
    workplace_service,
)


async def count(session, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return (await session.execute(stmt)).scalar_one()


class TestDeleteAccount:
    """Tests for the cascade that removes an account."""

    async def test_cascade_removes_everything_touching_the_account(
        self, session, user_factory
    ) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")
        carol = await user_factory("carol@x.com", "Carol")

        # alice -> bob, alice -> carol, bob -> alice, carol -> bob
        await like_service.like(session, alice, bob.id)
        await like_service.like(session, alice, carol.id)
        await like_service.like(session, bob, alice.id)
        await like_service.like(session, carol, bob.id)

        await workplace_service.create_workplace(
            session,
            alice.id,
            WorkPlaceCreate(name="Alice's cafe", latitude=1.0, longitude=2.0),
        )
        await workplace_service.create_workplace(
            session,
            bob.id,
            WorkPlaceCreate(name="Bob's library", latitude=1.0, longitude=2.0),
        )
        await message_service.send_message(
            session, alice, MessageCreate(target_user_id=bob.id, subject="hi", content="hello")
        )
        await message_service.send_message(
            session, carol, MessageCreate(target_user_id=alice.id, subject="yo", content="hey")
        )
        await message_service.send_message(
            session, bob, MessageCreate(target_user_id=carol.id, subject="sup", content="sup")
        )

        summary = await account_service.delete_account(session, alice.id)

        assert summary.likes_given == 2
        assert summary.likes_received == 1
        assert summary.work_places == 1
        assert summary.messages == 2

        assert await user_service.get_user_by_id(session, alice.id) is None
        assert await count(
            session, Like, or_(Like.from_user_id == alice.id, Like.to_user_id == alice.id)
        ) == 0
        assert await count(session, WorkPlace, WorkPlace.user_id == alice.id) == 0
        assert await count(session, WorkPlace) == 1
        assert await count(session, Message) == 1

        await session.refresh(bob)
        await session.refresh(carol)
        # bob: liked alice (gone) and was liked by alice (gone) and carol
        assert (bob.liked_count, bob.liked_by_count) == (0, 1)
        # carol: liked bob, was liked by alice (gone)
        assert (carol.liked_count, carol.liked_by_count) == (1, 0)

    async def test_counters_match_edges_after_deletion(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")
        await like_service.like(session, alice, bob.id)
        await like_service.like(session, bob, alice.id)

        await account_service.delete_account(session, bob.id)

        await session.refresh(alice)
        assert alice.liked_count == await count(session, Like, Like.from_user_id == alice.id)
        assert alice.liked_by_count == await count(session, Like, Like.to_user_id == alice.id)

    async def test_unknown_account_is_not_found(self, session) -> None:
        with pytest.raises(NotFoundError):
            await account_service.delete_account(session, uuid4())

    async def test_deleted_user_cannot_be_liked(self, session, user_factory) -> None:
        alice = await user_factory("alice@x.com", "Alice")
        bob = await user_factory("bob@x.com", "Bob")

        await account_service.delete_account(session, alice.id)

        with pytest.raises(NotFoundError):
            await like_service.like(session, bob, alice.id)


@pytest.fixture
async def file_db(tmp_path) -> AsyncGenerator[Database, None]:
    """File-backed SQLite so two sessions get separate connections."""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'workmate.db'}")
    await database.connect()
    await database.create_all()
    yield database
    await database.close()


async def create_users(db: Database, *names: str) -> list[User]:
    async with db.session() as s:
        users = [
            await user_service.create_user(
                s, IdentityDescriptor(email=f"{name.lower()}@x.com", name=name)
            )
            for name in names
        ]
        await s.commit()
        return users


async def assert_counters_match_edges(db: Database, *users: User) -> None:
    async with db.session() as s:
        for user in users:
            fresh = await user_service.get_user_by_id(s, user.id)
            assert fresh.liked_count == await count(s, Like, Like.from_user_id == user.id)
            assert fresh.liked_by_count == await count(s, Like, Like.to_user_id == user.id)


class TestDeleteAccountConcurrency:
    """Deletion racing with like/unlike committed from another connection."""

    async def test_unlike_committed_during_deletion(self, file_db, monkeypatch) -> None:
        alice, bob, carol = await create_users(file_db, "Alice", "Bob", "Carol")
        async with file_db.session() as s:
            for target in (alice, carol):
                await like_service.like(s, await user_service.get_user_by_id(s, bob.id), target.id)
            await s.commit()

        original_lookup = user_service.get_user_or_404

        async def lookup_then_unlike(session, user_id):
            monkeypatch.setattr(user_service, "get_user_or_404", original_lookup)
            user = await original_lookup(session, user_id)
            async with file_db.session() as other:
                await like_service.unlike(
                    other, await user_service.get_user_by_id(other, bob.id), alice.id
                )
                await other.commit()
            return user

        monkeypatch.setattr(user_service, "get_user_or_404", lookup_then_unlike)

        async with file_db.session() as s:
            summary = await account_service.delete_account(s, alice.id)
            await s.commit()

        assert summary.likes_received == 0
        await assert_counters_match_edges(file_db, bob, carol)
        async with file_db.session() as s:
            assert (await user_service.get_user_by_id(s, bob.id)).liked_count == 1

    async def test_like_committed_during_deletion(self, file_db, monkeypatch) -> None:
        alice, bob = await create_users(file_db, "Alice", "Bob")

        original_lookup = user_service.get_user_or_404

        async def lookup_then_like(session, user_id):
            monkeypatch.setattr(user_service, "get_user_or_404", original_lookup)
            user = await original_lookup(session, user_id)
            async with file_db.session() as other:
                await like_service.like(
                    other, await user_service.get_user_by_id(other, bob.id), alice.id
                )
                await other.commit()
            return user

        monkeypatch.setattr(user_service, "get_user_or_404", lookup_then_like)

        async with file_db.session() as s:
            summary = await account_service.delete_account(s, alice.id)
            await s.commit()

        assert summary.likes_received == 1
        await assert_counters_match_edges(file_db, bob)
        async with file_db.session() as s:
            assert (await user_service.get_user_by_id(s, bob.id)).liked_count == 0
