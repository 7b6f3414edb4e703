"""User Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field, model_validator

from workmate.schemas.common import CamelModel

NAME_MAX_LENGTH = 100
TEXT_MAX_LENGTH = 1000
URL_MAX_LENGTH = 2048


class UserProfileFields(CamelModel):
    """Free-text profile fields shared by join and update."""

    profile_image: str | None = Field(default=None, max_length=URL_MAX_LENGTH)
    skill_set: str | None = Field(default=None, max_length=TEXT_MAX_LENGTH)
    github_url: str | None = Field(default=None, max_length=URL_MAX_LENGTH)
    linkedin_url: str | None = Field(default=None, max_length=URL_MAX_LENGTH)
    company: str | None = Field(default=None, max_length=255)
    mbti: str | None = Field(default=None, max_length=10)
    collaboration_goal: str | None = Field(default=None, max_length=TEXT_MAX_LENGTH)


class IdentityDescriptor(UserProfileFields):
    """Candidate identity handed to identity resolution."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    github_id: str | None = Field(default=None, max_length=255)
    google_id: str | None = Field(default=None, max_length=255)

    @property
    def has_provider_id(self) -> bool:
        return bool(self.github_id or self.google_id)


class UserJoin(IdentityDescriptor):
    """Schema for POST /auth/join."""


class UserCheck(CamelModel):
    """Schema for POST /auth/check. At least one identifier is required."""

    email: EmailStr | None = None
    github_id: str | None = None
    google_id: str | None = None

    @model_validator(mode="after")
    def require_identifier(self) -> "UserCheck":
        if not (self.email or self.github_id or self.google_id):
            raise ValueError("One of email, githubId or googleId is required")
        return self


class UserUpdate(UserProfileFields):
    """Schema for PUT /auth/update (partial)."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)


class UserResponse(UserProfileFields):
    """Full view of the authenticated user."""

    id: UUID
    email: str
    name: str
    github_id: str | None = None
    google_id: str | None = None
    liked_count: int
    liked_by_count: int
    created_at: datetime
    updated_at: datetime
    last_login_at: datetime | None = None


class UserSummary(CamelModel):
    """Short identity returned by join/check."""

    id: UUID
    email: str
    name: str
    profile_image: str | None = None
    github_id: str | None = None
    google_id: str | None = None


class UserPublic(CamelModel):
    """Public projection of a user shown next to their work places."""

    id: UUID
    name: str
    profile_image: str | None = None
    skill_set: str | None = None
    github_url: str | None = None
    linkedin_url: str | None = None
    company: str | None = None
    mbti: str | None = None
    collaboration_goal: str | None = None


class LikedUserProfile(CamelModel):
    """Counterpart profile in liked/liked-by listings."""

    id: UUID
    email: str
    name: str
    profile_image: str | None = None
    skill_set: str | None = None
    company: str | None = None
    mbti: str | None = None
    collaboration_goal: str | None = None


class JoinResponse(CamelModel):
    message: str
    user: UserSummary


class CheckResponse(CamelModel):
    exists: bool
    user: UserSummary | None = None


class MeResponse(CamelModel):
    user: UserResponse


class AuthStatusResponse(CamelModel):
    authenticated: bool
    user: UserResponse | None = None
