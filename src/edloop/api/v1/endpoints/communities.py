"""Community-related endpoints for the EdLoop API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy import or_, select

from edloop.core.exceptions import NotFoundError
from edloop.core.settings import settings
from edloop.models import Community
from edloop.schemas.community import CommunityCreate, CommunityResponse
from edloop.schemas.post import PostResponse
from edloop.services import post_service

from ..dependencies import ClockDep, CurrentUserDep, OptionalUserDep, SessionDep
from .posts import serialize_posts

router = APIRouter(prefix="/communities", tags=["communities"])


def _get_community_or_404(db: SessionDep, community_id: str) -> Community:
    community = db.get(Community, community_id)
    if community is None:
        raise NotFoundError("Community not found")
    return community


@router.get("/", response_model=list[CommunityResponse])
async def list_communities(
    db: SessionDep,
    search: str | None = Query(None, description="Substring match on name or description"),
    limit: int = Query(50, ge=1, le=100),
) -> list[Community]:
    """List communities, optionally filtered by a search term."""
    stmt = select(Community)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                Community.name.ilike(pattern),
                Community.display_name.ilike(pattern),
                Community.description.ilike(pattern),
                Community.category.ilike(pattern),
            )
        )
    stmt = stmt.order_by(Community.created_at, Community.name).limit(limit)
    return list(db.execute(stmt).scalars())


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(community_id: str, db: SessionDep) -> Community:
    """Get a specific community by ID."""
    return _get_community_or_404(db, community_id)


@router.post("/", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
async def create_community(
    community_data: CommunityCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Community:
    """Create a new community."""
    existing = db.execute(
        select(Community).where(Community.name == community_data.name)
    ).scalars().first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Community name already exists",
        )

    community = Community(
        name=community_data.name,
        display_name=community_data.display_name,
        description=community_data.description,
        category=community_data.category,
        created_by=current_user.id,
    )
    db.add(community)
    db.commit()
    db.refresh(community)
    return community


@router.get("/{community_id}/posts", response_model=list[PostResponse])
async def list_community_posts(
    community_id: str,
    db: SessionDep,
    clock: ClockDep,
    viewer: OptionalUserDep,
    sort: str | None = Query(None, description="new, top or hot (default hot)"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.feed_default_limit, ge=1, le=settings.feed_max_limit),
) -> list[PostResponse]:
    """List a community's posts in the requested order."""
    _get_community_or_404(db, community_id)
    posts = post_service.list_feed(
        db,
        sort=sort,
        page=page,
        limit=limit,
        community_id=community_id,
        clock=clock,
    )
    return serialize_posts(db, posts, viewer)
