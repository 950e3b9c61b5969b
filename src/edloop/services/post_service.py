"""Service-level helpers for creating, editing, deleting and listing posts."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from edloop.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    PostValidationError,
)
from edloop.db.time import utcnow
from edloop.models import Community, Post
from edloop.repositories.post_repo import PostRepository
from edloop.schemas.community import CommunitySummary
from edloop.schemas.post import (
    NoteFile,
    PostCreate,
    PostResponse,
    PostUpdate,
    missing_payload,
)
from edloop.services.ranking import Clock, SortStrategy, rank, system_clock
from edloop.services.user_service import to_author_summary
from edloop.services.vote_ledger import VoteLedger, post_lock
from edloop.services.voting import VoteKind

logger = logging.getLogger(__name__)


def create_post(db: Session, *, author_id: str, payload: PostCreate) -> Post:
    """Create a post and seed the author's up vote in the same transaction.

    Raises:
        NotFoundError: If the target community does not exist.
    """
    if db.get(Community, payload.community_id) is None:
        raise NotFoundError("Community not found")

    repo = PostRepository(db)
    post = repo.create(
        author_id=author_id,
        community_id=payload.community_id,
        title=payload.title,
        content=payload.content,
        type=payload.type,
        tags=list(payload.tags),
        link_url=payload.link_url,
        image_url=payload.image_url,
        note_file_name=payload.note_file.name if payload.note_file else None,
        note_file_url=payload.note_file.url if payload.note_file else None,
        upvotes=0,
        downvotes=0,
    )
    VoteLedger(db).seed_author_vote(post)
    db.commit()
    db.refresh(post)
    logger.info("Created post %s in community %s", post.id, post.community_id)
    return post


def get_post_or_404(db: Session, post_id: str) -> Post:
    """Return the post or raise ``NotFoundError``."""
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _ensure_author(post: Post, user_id: str, action: str) -> None:
    if post.author_id != user_id:
        raise PermissionDeniedError(f"Not authorized to {action} this post")


def update_post(db: Session, *, post_id: str, user_id: str, payload: PostUpdate) -> Post:
    """Apply the author's edits; vote counters are never touched here.

    Raises:
        PostValidationError: The edited post would lack the payload its
            type requires, e.g. ``type`` switched to ``link`` without a URL.
    """
    post = get_post_or_404(db, post_id)
    _ensure_author(post, user_id, "update")

    changes = payload.model_dump(exclude_unset=True)
    problem = missing_payload(
        changes.get("type", post.type),
        {
            "content": changes.get("content", post.content),
            "link_url": changes.get("link_url", post.link_url),
            "image_url": changes.get("image_url", post.image_url),
            "note_file": post.note_file_url,
        },
    )
    if problem:
        raise PostValidationError(problem)

    try:
        for field, value in changes.items():
            setattr(post, field, value)
        post.updated_at = utcnow()
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(post)
    return post


def delete_post(db: Session, *, post_id: str, user_id: str) -> None:
    """Delete a post after removing its votes from the ledger.

    Holds the same per-post lock as ``VoteLedger.cast_vote`` so a delete never
    interleaves with a vote on the same post.
    """
    with post_lock(post_id):
        try:
            post = PostRepository(db).get_for_update(post_id)
            if post is None:
                raise NotFoundError("Post not found")
            _ensure_author(post, user_id, "delete")
            removed = VoteLedger(db).remove_votes_for_post(post_id)
            PostRepository(db).delete(post)
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Deleted post %s and %d votes", post_id, removed)


def list_feed(
    db: Session,
    *,
    sort: str | SortStrategy | None,
    page: int,
    limit: int,
    community_id: str | None = None,
    clock: Clock = system_clock,
) -> list[Post]:
    """Return one page of posts ordered by ``sort``."""
    candidates = PostRepository(db).list_for_feed(community_id)
    ordered = rank(candidates, sort, clock)
    start = (page - 1) * limit
    return ordered[start:start + limit]


def to_post_out(post: Post, user_vote: VoteKind | None = None) -> PostResponse:
    """Convert a Post ORM instance to an API schema."""
    note_file = None
    if post.note_file_url:
        note_file = NoteFile(name=post.note_file_name, url=post.note_file_url)
    return PostResponse(
        id=post.id,
        title=post.title,
        content=post.content,
        type=post.type,
        author_id=post.author_id,
        community_id=post.community_id,
        author=to_author_summary(post.author) if post.author else None,
        community=(
            CommunitySummary.model_validate(post.community) if post.community else None
        ),
        upvotes=post.upvotes,
        downvotes=post.downvotes,
        comment_count=post.comment_count,
        tags=list(post.tags or []),
        link_url=post.link_url,
        image_url=post.image_url,
        note_file=note_file,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user_vote=user_vote.value if user_vote is not None else None,
    )
