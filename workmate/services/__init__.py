"""Business logic services."""

from workmate.services import account as account_service
from workmate.services import like as like_service
from workmate.services import message as message_service
from workmate.services import user as user_service
from workmate.services import workplace as workplace_service

__all__ = [
    "account_service",
    "like_service",
    "message_service",
    "user_service",
    "workplace_service",
]
