"""Integration tests for the /message routes."""

from uuid import uuid4


class TestSendMessage:
    """Tests for POST /message/send."""

    async def test_send_returns_201(self, make_user, auth_client) -> None:
        alice = await make_user("alice@x.com", "Alice")
        bob = await make_user("bob@x.com", "Bob")

        response = await auth_client(alice).post(
            "/message/send",
            json={"targetUserId": str(bob.id), "subject": "Hello", "content": "Cowork?"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["fromUserId"] == str(alice.id)
        assert data["targetUserId"] == str(bob.id)
        assert data["toUserEmail"] == "bob@x.com"
        assert data["isRead"] is False

    async def test_empty_subject_is_400(self, make_user, auth_client) -> None:
        alice = await make_user("alice@x.com", "Alice")
        bob = await make_user("bob@x.com", "Bob")

        response = await auth_client(alice).post(
            "/message/send",
            json={"targetUserId": str(bob.id), "subject": "", "content": "Cowork?"},
        )

        assert response.status_code == 400

    async def test_unknown_recipient_is_404(self, make_user, auth_client) -> None:
        alice = await make_user("alice@x.com", "Alice")

        response = await auth_client(alice).post(
            "/message/send",
            json={"targetUserId": str(uuid4()), "subject": "Hello", "content": "Anyone?"},
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Recipient not found"}


class TestReadMessages:
    """Tests for listings, single reads and read receipts."""

    async def test_received_and_sent(self, make_user, auth_client) -> None:
        alice = await make_user("alice@x.com", "Alice")
        bob = await make_user("bob@x.com", "Bob")
        a = auth_client(alice)
        b = auth_client(bob)
        for subject in ("one", "two"):
            await a.post(
                "/message/send",
                json={"targetUserId": str(bob.id), "subject": subject, "content": "..."},
            )

        received = await b.get("/message/received")
        sent = await a.get("/message/sent")

        assert [m["subject"] for m in received.json()["messages"]] == ["two", "one"]
        assert [m["subject"] for m in sent.json()["messages"]] == ["two", "one"]

    async def test_single_message_is_participants_only(self, make_user, auth_client) -> None:
        alice = await make_user("alice@x.com", "Alice")
        bob = await make_user("bob@x.com", "Bob")
        eve = await make_user("eve@x.com", "Eve")
        sent = await auth_client(alice).post(
            "/message/send",
            json={"targetUserId": str(bob.id), "subject": "Private", "content": "..."},
        )
        message_id = sent.json()["id"]

        as_bob = await auth_client(bob).get(f"/message/{message_id}")
        as_eve = await auth_client(eve).get(f"/message/{message_id}")
        missing = await auth_client(bob).get(f"/message/{uuid4()}")

        assert as_bob.status_code == 200
        assert as_eve.status_code == 403
        assert missing.status_code == 404

    async def test_mark_read(self, make_user, auth_client) -> None:
        alice = await make_user("alice@x.com", "Alice")
        bob = await make_user("bob@x.com", "Bob")
        sent = await auth_client(alice).post(
            "/message/send",
            json={"targetUserId": str(bob.id), "subject": "Hi", "content": "..."},
        )
        message_id = sent.json()["id"]

        by_sender = await auth_client(alice).patch(f"/message/{message_id}/read")
        by_target = await auth_client(bob).patch(f"/message/{message_id}/read")

        assert by_sender.status_code == 403
        assert by_target.status_code == 200
        assert by_target.json()["isRead"] is True
        assert by_target.json()["readAt"] is not None
