"""Pydantic schemas."""

from workmate.schemas.common import CamelModel, ErrorResponse, MessageResponse, error_responses
from workmate.schemas.like import (
    LikeActionResponse,
    LikedUserEntry,
    LikedUserListResponse,
    LikeStatusResponse,
)
from workmate.schemas.message import MessageCreate, MessageListResponse, MessageOut
from workmate.schemas.user import (
    AuthStatusResponse,
    CheckResponse,
    IdentityDescriptor,
    JoinResponse,
    LikedUserProfile,
    MeResponse,
    UserCheck,
    UserJoin,
    UserPublic,
    UserResponse,
    UserSummary,
    UserUpdate,
)
from workmate.schemas.workplace import (
    Note,
    NoteCreate,
    WorkPlaceCreate,
    WorkPlaceListResponse,
    WorkPlaceResponse,
    WorkPlaceUpdate,
    WorkPlaceWithOwner,
    WorkPlaceWithOwnerListResponse,
)

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "error_responses",
    "MessageResponse",
    "LikeActionResponse",
    "LikedUserEntry",
    "LikedUserListResponse",
    "LikeStatusResponse",
    "MessageCreate",
    "MessageListResponse",
    "MessageOut",
    "AuthStatusResponse",
    "CheckResponse",
    "IdentityDescriptor",
    "JoinResponse",
    "LikedUserProfile",
    "MeResponse",
    "UserCheck",
    "UserJoin",
    "UserPublic",
    "UserResponse",
    "UserSummary",
    "UserUpdate",
    "Note",
    "NoteCreate",
    "WorkPlaceCreate",
    "WorkPlaceListResponse",
    "WorkPlaceResponse",
    "WorkPlaceUpdate",
    "WorkPlaceWithOwner",
    "WorkPlaceWithOwnerListResponse",
]
