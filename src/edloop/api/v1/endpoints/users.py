"""User profile endpoints for the EdLoop API."""

from __future__ import annotations

from fastapi import APIRouter

from edloop.models import User
from edloop.schemas.post import PostResponse
from edloop.schemas.user import ProfileUpdateRequest, UserProfile
from edloop.services import user_service

from ..dependencies import CurrentUserDep, SessionDep
from .posts import serialize_posts

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserProfile)
async def get_my_profile(current_user: CurrentUserDep) -> UserProfile:
    """Get the caller's own profile."""
    return user_service.to_user_profile(current_user)


@router.put("/me", response_model=UserProfile)
async def update_my_profile(
    profile_data: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> UserProfile:
    """Update bio, interests, domain or university; omitted fields are kept."""
    user = user_service.update_profile(db, current_user, profile_data)
    return user_service.to_user_profile(user)


@router.get("/me/posts", response_model=list[PostResponse])
async def list_my_posts(current_user: CurrentUserDep, db: SessionDep) -> list[PostResponse]:
    """List the caller's most recent posts, newest first."""
    posts = user_service.list_user_posts(db, current_user.id)
    return serialize_posts(db, posts, current_user)


@router.get("/{user_id}", response_model=UserProfile)
async def get_user_profile(user_id: str, db: SessionDep) -> UserProfile:
    """Get any user's public profile."""
    user: User = user_service.get_user_or_404(db, user_id)
    return user_service.to_user_profile(user)
