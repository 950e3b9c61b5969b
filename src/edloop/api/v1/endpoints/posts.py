"""Post-related endpoints for the EdLoop API."""

from fastapi import APIRouter, Query, Response, status

from edloop.core.settings import settings
from edloop.models import Post, User
from edloop.schemas.post import PostCreate, PostResponse, PostUpdate
from edloop.services import post_service
from edloop.services.vote_ledger import VoteLedger
from edloop.services.voting import VoteKind

from ..dependencies import ClockDep, CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/posts", tags=["posts"])


def serialize_posts(
    db: SessionDep, posts: list[Post], viewer: User | None
) -> list[PostResponse]:
    """Convert posts to responses, filling ``userVote`` for a signed-in viewer."""
    votes: dict[str, VoteKind] = {}
    if viewer is not None:
        votes = VoteLedger(db).get_user_votes(viewer.id, [post.id for post in posts])
    return [post_service.to_post_out(post, votes.get(post.id)) for post in posts]


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    db: SessionDep,
    clock: ClockDep,
    viewer: OptionalUserDep,
    sort: str | None = Query(None, description="new, top or hot (default hot)"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.feed_default_limit, ge=1, le=settings.feed_max_limit),
    community_id: str | None = Query(None, alias="communityId"),
) -> list[PostResponse]:
    """List posts for the main feed.

    Unknown ``sort`` values fall back to ``hot``.
    """
    posts = post_service.list_feed(
        db,
        sort=sort,
        page=page,
        limit=limit,
        community_id=community_id,
        clock=clock,
    )
    return serialize_posts(db, posts, viewer)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> PostResponse:
    """Get a specific post by ID."""
    post = post_service.get_post_or_404(db, post_id)
    return serialize_posts(db, [post], viewer)[0]


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Create a new post; the author's up vote is recorded with it."""
    post = post_service.create_post(db, author_id=current_user.id, payload=post_data)
    return post_service.to_post_out(post, VoteKind.UP)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PostResponse:
    """Update a post's content (author only)."""
    post = post_service.update_post(
        db, post_id=post_id, user_id=current_user.id, payload=post_data
    )
    return serialize_posts(db, [post], current_user)[0]


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete a post and every vote cast on it (author only)."""
    post_service.delete_post(db, post_id=post_id, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
