"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing application modules
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("FRONTEND_URL", "http://localhost:5173")

from workmate.core.database import Database  # noqa: E402
from workmate.core.deps import AUTH_COOKIE_NAME  # noqa: E402
from workmate.core.security import create_access_token  # noqa: E402
from workmate.main import create_app  # noqa: E402
from workmate.models.user import User  # noqa: E402
from workmate.schemas.user import IdentityDescriptor  # noqa: E402
from workmate.services import user_service  # noqa: E402


@pytest.fixture
async def db() -> AsyncGenerator[Database, None]:
    """Provide an in-memory SQLite database with all tables created.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    database = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await database.connect()
    await database.create_all()
    yield database
    await database.close()


@pytest.fixture
async def session(db: Database) -> AsyncGenerator[Any, None]:
    """Provide a database session for service-level tests."""
    async with db.session() as session:
        yield session


@pytest.fixture
def oauth_providers() -> dict[str, Any]:
    """OAuth registry used by the app. Empty means no provider is configured."""
    return {}


@pytest.fixture
def app(db: Database, oauth_providers: dict[str, Any]) -> Any:
    """Provide an application wired to the test database."""
    return create_app(database=db, oauth_providers=oauth_providers)


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Provide an anonymous HTTP client for the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def make_user(db: Database) -> Callable[..., Awaitable[User]]:
    """Factory that inserts and commits a user.

    Usage: ``alice = await make_user("alice@x.com", "Alice")``
    """

    async def _make_user(email: str, name: str = "Test User", **fields: Any) -> User:
        async with db.session() as s:
            user = await user_service.create_user(
                s,
                IdentityDescriptor(email=email, name=name, **fields),
            )
            await s.commit()
            return user

    return _make_user


@pytest.fixture
async def auth_client(app: Any) -> AsyncGenerator[Callable[[User], AsyncClient], None]:
    """Factory for HTTP clients that carry a user's credential cookie."""
    clients: list[AsyncClient] = []

    def _client_for(user: User) -> AsyncClient:
        c = AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            cookies={AUTH_COOKIE_NAME: create_access_token(user.id)},
        )
        clients.append(c)
        return c

    yield _client_for

    for c in clients:
        await c.aclose()


@pytest.fixture
def user_factory(session: Any) -> Callable[..., Awaitable[User]]:
    """Factory that creates users inside the service-test session (no commit)."""

    async def _create(email: str, name: str = "Test User", **fields: Any) -> User:
        return await user_service.create_user(
            session,
            IdentityDescriptor(email=email, name=name, **fields),
        )

    return _create
