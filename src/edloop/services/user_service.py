"""Helpers for reading and editing user profiles."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from edloop.core.exceptions import NotFoundError
from edloop.models import Post, User
from edloop.schemas.user import AuthorSummary, ProfileUpdateRequest, UserProfile

__all__ = [
    "get_user_or_404",
    "update_profile",
    "list_user_posts",
    "to_author_summary",
    "to_user_profile",
]

logger = logging.getLogger(__name__)

USER_POSTS_LIMIT = 50


def get_user_or_404(db: Session, user_id: str) -> User:
    """Return a single user by primary key or raise ``NotFoundError``."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, user: User, update_data: ProfileUpdateRequest) -> User:
    """Apply partial profile updates to ``user``."""
    try:
        for key, value in update_data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("Updated profile of user %s", user.id)
    return user


def list_user_posts(db: Session, user_id: str, limit: int = USER_POSTS_LIMIT) -> list[Post]:
    """Return the user's most recent posts, newest first."""
    stmt = (
        select(Post)
        .where(Post.author_id == user_id)
        .options(selectinload(Post.author), selectinload(Post.community))
        .order_by(Post.created_at.desc(), Post.id)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars())


def to_author_summary(user: User) -> AuthorSummary:
    """Convert a User to the byline embedded in post responses."""
    return AuthorSummary(
        id=user.id,
        username=user.username,
        display_name=user.display_name,
        university=user.university,
        verified=user.verified,
        karma=user.karma,
        join_date=user.created_at,
    )


def to_user_profile(user: User) -> UserProfile:
    """Convert a User to its public profile."""
    return UserProfile(
        **to_author_summary(user).model_dump(),
        bio=user.bio,
        interests=list(user.interests or []),
        domain=user.domain or "",
        avatar=user.avatar_url,
    )
