"""Like graph Pydantic schemas."""

from datetime import datetime

from workmate.schemas.common import CamelModel
from workmate.schemas.user import LikedUserProfile


class LikeActionResponse(CamelModel):
    """Result of a like or unlike, with the counters after the change."""

    message: str
    liked_count: int
    target_liked_by_count: int


class LikeStatusResponse(CamelModel):
    is_liked: bool


class LikedUserEntry(CamelModel):
    liked_at: datetime
    user: LikedUserProfile


class LikedUserListResponse(CamelModel):
    """One page of an edge-joined listing.

    ``has_more`` is true when the page is full, which can report one extra
    empty page when the total is an exact multiple of ``limit``.
    """

    users: list[LikedUserEntry]
    page: int
    limit: int
    has_more: bool
