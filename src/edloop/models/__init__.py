"""SQLAlchemy models for the EdLoop application."""

from .community import Community
from .post import POST_TYPES, Post
from .user import User
from .vote import Vote

__all__ = [
    "Community",
    "POST_TYPES", "Post",
    "User",
    "Vote",
]
