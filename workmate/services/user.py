"""User service: identity store lookups and identity resolution."""

from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workmate.core.database import utcnow
from workmate.core.errors import ConflictError, NotFoundError
from workmate.models.user import User
from workmate.schemas.user import IdentityDescriptor, UserCheck, UserUpdate

logger = structlog.get_logger()


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> User | None:
    """Get a user by their ID."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_or_404(session: AsyncSession, user_id: UUID) -> User:
    user = await get_user_by_id(session, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Get a user by their email address."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_github_id(session: AsyncSession, github_id: str) -> User | None:
    result = await session.execute(select(User).where(User.github_id == github_id))
    return result.scalar_one_or_none()


async def get_user_by_google_id(session: AsyncSession, google_id: str) -> User | None:
    result = await session.execute(select(User).where(User.google_id == google_id))
    return result.scalar_one_or_none()


async def get_user_by_provider_id(
    session: AsyncSession,
    github_id: str | None = None,
    google_id: str | None = None,
) -> User | None:
    """Get a user by any of the supplied OAuth provider IDs."""
    if github_id:
        user = await get_user_by_github_id(session, github_id)
        if user:
            return user
    if google_id:
        return await get_user_by_google_id(session, google_id)
    return None


async def _flush_unique_email(session: AsyncSession) -> None:
    """Flush, turning a unique-constraint rejection into a conflict.

    The email lookups before an insert or update can go stale; the unique
    index decides, and the caller's session rolls back.
    """
    try:
        await session.flush()
    except IntegrityError as e:
        logger.info("User write rejected by unique constraint")
        raise ConflictError("Email is already registered") from e


async def create_user(session: AsyncSession, data: IdentityDescriptor) -> User:
    """Create a new user with zeroed like counters."""
    user = User(
        **data.model_dump(exclude_none=True),
        liked_count=0,
        liked_by_count=0,
    )
    session.add(user)
    await _flush_unique_email(session)
    await session.refresh(user)
    return user


async def update_user(
    session: AsyncSession,
    user: User,
    user_data: UserUpdate,
) -> User:
    """Apply a partial profile update.

    Changing the email to one that another account already uses raises
    ConflictError.
    """
    update_data = user_data.model_dump(exclude_unset=True)
    # email and name are required columns; an explicit null means "unchanged"
    for required in ("email", "name"):
        if required in update_data and update_data[required] is None:
            del update_data[required]

    new_email = update_data.get("email")
    if new_email is not None and new_email != user.email:
        if await get_user_by_email(session, new_email) is not None:
            raise ConflictError("Email is already registered")

    for field, value in update_data.items():
        setattr(user, field, value)
    await _flush_unique_email(session)
    await session.refresh(user)
    return user


async def touch_last_login(session: AsyncSession, user: User) -> User:
    """Stamp last_login_at with the current time."""
    user.last_login_at = utcnow()
    await session.flush()
    await session.refresh(user)
    return user


async def resolve_identity(
    session: AsyncSession,
    descriptor: IdentityDescriptor,
) -> tuple[User, bool]:
    """Resolve a candidate identity to exactly one user.

    Order: provider id match (login, no merge), then email match (attach the
    provider id and avatar to that account), then create a new account.

    Returns:
        Tuple of (user, created) where created is True if new user was created
    """
    # First try to find by provider ID
    user = await get_user_by_provider_id(
        session,
        github_id=descriptor.github_id,
        google_id=descriptor.google_id,
    )
    if user:
        await touch_last_login(session, user)
        return user, False

    # Same person signing in with another method: link to the email account
    existing_user = await get_user_by_email(session, descriptor.email)
    if existing_user:
        if descriptor.github_id:
            existing_user.github_id = descriptor.github_id
        if descriptor.google_id:
            existing_user.google_id = descriptor.google_id
        if descriptor.profile_image:
            existing_user.profile_image = descriptor.profile_image
        existing_user.last_login_at = utcnow()
        await session.flush()
        await session.refresh(existing_user)
        logger.info(
            "Provider attached to existing account",
            user_id=str(existing_user.id),
            github=bool(descriptor.github_id),
            google=bool(descriptor.google_id),
        )
        return existing_user, False

    user = await create_user(session, descriptor)
    return user, True


async def join(session: AsyncSession, descriptor: IdentityDescriptor) -> tuple[User, bool]:
    """Register an account from the join form.

    A manual join (no provider id) with a known email is a conflict and
    leaves the existing account untouched. A join carrying a provider id
    goes through identity resolution.
    """
    if descriptor.has_provider_id:
        return await resolve_identity(session, descriptor)

    if await get_user_by_email(session, descriptor.email) is not None:
        raise ConflictError("Email is already registered")

    user = await create_user(session, descriptor)
    return user, True


async def check(session: AsyncSession, lookup: UserCheck) -> User | None:
    """Find an existing account by email, then GitHub id, then Google id.

    Stamps last_login_at when an account is found.
    """
    user = None
    if lookup.email:
        user = await get_user_by_email(session, lookup.email)
    if user is None and lookup.github_id:
        user = await get_user_by_github_id(session, lookup.github_id)
    if user is None and lookup.google_id:
        user = await get_user_by_google_id(session, lookup.google_id)

    if user is not None:
        await touch_last_login(session, user)
    return user
