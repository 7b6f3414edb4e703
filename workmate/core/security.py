"""Security utilities for JWT token handling and sliding renewal."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

from jose import JWTError, jwt
from pydantic import BaseModel

from workmate.core.config import get_settings

settings = get_settings()

# JWT Configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = settings.token_ttl_hours
RENEW_WINDOW = timedelta(hours=settings.token_renew_window_hours)


class TokenData(BaseModel):
    """Data encoded in JWT token."""

    user_id: UUID
    issued_at: datetime
    expires_at: datetime


def create_access_token(
    user_id: UUID,
    issued_at: datetime | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        user_id: The user's UUID
        issued_at: Issue time, defaults to now. The token is valid for
            ACCESS_TOKEN_EXPIRE_HOURS from this instant.

    Returns:
        Encoded JWT token string
    """
    if issued_at is None:
        issued_at = datetime.now(timezone.utc)
    expire = issued_at + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)

    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": expire,
    }

    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> TokenData | None:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT token string

    Returns:
        TokenData if valid, None if invalid, malformed or expired
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        user_id = payload.get("sub")
        iat = payload.get("iat")
        exp = payload.get("exp")

        if user_id is None or iat is None or exp is None:
            return None

        return TokenData(
            user_id=UUID(user_id),
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (JWTError, ValueError, TypeError):
        return None


def should_renew(token_data: TokenData, now: datetime | None = None) -> bool:
    """Whether a valid token is still young enough to slide its window.

    Tokens are re-issued only while they are at most RENEW_WINDOW old; an
    older token keeps its original expiry.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return now - token_data.issued_at <= RENEW_WINDOW


def create_cookie_token(user_id: UUID) -> tuple[str, int]:
    """Create a token suitable for httpOnly cookie storage.

    Returns:
        Tuple of (token, max_age_seconds)
    """
    token = create_access_token(user_id)
    max_age = ACCESS_TOKEN_EXPIRE_HOURS * 60 * 60  # Convert to seconds
    return token, max_age
