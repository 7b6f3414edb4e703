"""Unit tests for credential tokens and sliding renewal."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import jwt

from workmate.core.security import (
    ALGORITHM,
    create_access_token,
    create_cookie_token,
    decode_access_token,
    should_renew,
)


class TestAccessToken:
    """Tests for token creation and decoding."""

    def test_round_trip_carries_user_and_window(self) -> None:
        """Test a fresh token decodes to its user with a 24h window."""
        user_id = uuid4()
        token_data = decode_access_token(create_access_token(user_id))

        assert token_data is not None
        assert token_data.user_id == user_id
        assert token_data.expires_at - token_data.issued_at == timedelta(hours=24)

    def test_expired_token_is_rejected(self) -> None:
        """Test a token issued 24h01m ago decodes to None."""
        issued_at = datetime.now(timezone.utc) - timedelta(hours=24, minutes=1)
        token = create_access_token(uuid4(), issued_at=issued_at)

        assert decode_access_token(token) is None

    def test_wrong_signature_is_rejected(self) -> None:
        """Test a token signed with another key decodes to None."""
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "iat": int(now.timestamp()),
                "exp": now + timedelta(hours=1),
            },
            "some-other-secret",
            algorithm=ALGORITHM,
        )

        assert decode_access_token(token) is None

    def test_garbage_is_rejected(self) -> None:
        assert decode_access_token("not-a-jwt") is None

    def test_non_uuid_subject_is_rejected(self) -> None:
        """Test a well-signed token whose subject is not a UUID decodes to None."""
        from workmate.core.security import settings

        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"sub": "alice", "iat": int(now.timestamp()), "exp": now + timedelta(hours=1)},
            settings.secret_key,
            algorithm=ALGORITHM,
        )

        assert decode_access_token(token) is None

    def test_cookie_token_max_age_is_24_hours(self) -> None:
        _, max_age = create_cookie_token(uuid4())
        assert max_age == 24 * 60 * 60


class TestShouldRenew:
    """Tests for the 2-hour renewal window."""

    def test_renews_inside_window(self) -> None:
        """Test a token presented 1h59m after issue is renewed."""
        issued_at = datetime.now(timezone.utc) - timedelta(hours=1, minutes=59)
        token_data = decode_access_token(create_access_token(uuid4(), issued_at=issued_at))

        assert token_data is not None
        assert should_renew(token_data) is True

    def test_keeps_expiry_outside_window(self) -> None:
        """Test a token 3h old stays valid but is not re-issued."""
        issued_at = datetime.now(timezone.utc) - timedelta(hours=3)
        token_data = decode_access_token(create_access_token(uuid4(), issued_at=issued_at))

        assert token_data is not None
        assert should_renew(token_data) is False

    def test_explicit_now(self) -> None:
        issued_at = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        token_data = decode_access_token(
            create_access_token(uuid4(), issued_at=datetime.now(timezone.utc))
        )
        assert token_data is not None

        token_data.issued_at = issued_at
        assert should_renew(token_data, now=issued_at + timedelta(hours=2)) is True
        assert should_renew(token_data, now=issued_at + timedelta(hours=2, seconds=1)) is False
