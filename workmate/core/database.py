"""Database handle with SQLAlchemy 2.0 async support."""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from typing import Annotated, Any

import structlog
from fastapi import Depends, Request
from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = structlog.get_logger()

# Naming convention for constraints (helps with migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    metadata = MetaData(naming_convention=convention)


def utcnow() -> datetime:
    """Timezone-aware current time used for model timestamps."""
    return datetime.now(timezone.utc)


class Database:
    """Owns the async engine and session factory for one process.

    Constructed by the application entry point and stored on ``app.state``;
    ``connect()`` and ``close()`` are driven by the lifespan handler.
    Extra keyword arguments are passed through to ``create_async_engine``.
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = url
        self.engine_kwargs = engine_kwargs
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    async def connect(self) -> None:
        """Create the engine and session factory (idempotent)."""
        if self.engine is not None:
            return
        self.engine = create_async_engine(self.url, **self.engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Database engine created", dialect=self.engine.dialect.name)

    async def close(self) -> None:
        """Dispose of all pooled connections."""
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self.session_factory = None
        logger.info("Database connections closed")

    def session(self) -> AsyncSession:
        if self.session_factory is None:
            raise RuntimeError("Database is not connected. Call connect() first.")
        return self.session_factory()

    async def create_all(self) -> None:
        """Create all tables.

        Note: In production, use Alembic migrations instead.
        This is useful for testing or initial development.
        """
        # Import models so they register on Base.metadata
        import workmate.models  # noqa: F401

        if self.engine is None:
            await self.connect()
        assert self.engine is not None
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Run a trivial query to verify connectivity."""
        if self.engine is None:
            return False
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True


def database_from_settings(settings: Any) -> Database:
    """Build the production database handle from settings."""
    kwargs: dict[str, Any] = {
        "echo": settings.debug,  # Log SQL statements in debug mode
        "pool_pre_ping": True,  # Verify connections before use
    }
    if settings.database_url.startswith("postgresql"):
        kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=30,  # Seconds to wait for a connection
            pool_recycle=1800,  # Recycle connections after 30 minutes
            connect_args={"command_timeout": settings.database_command_timeout},
        )
    return Database(settings.database_url, **kwargs)


def get_database(request: Request) -> Database:
    """Return the database handle attached to the running application."""
    return request.app.state.db


async def get_async_session(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides an async database session.

    One session (and transaction) per request; the auth dependency and the
    route share it. Routes commit explicitly, anything that escapes rolls back.
    """
    async with database.session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# Type alias for dependency injection
AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]
