"""SQLAlchemy models.

All models should be imported here for Alembic to detect them.
"""

from workmate.core.database import Base
from workmate.models.like import Like
from workmate.models.message import Message
from workmate.models.user import User
from workmate.models.workplace import WorkPlace

__all__ = ["Base", "Like", "Message", "User", "WorkPlace"]
