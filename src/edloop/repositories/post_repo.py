"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from edloop.db.time import utcnow
from edloop.models.post import Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: str) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def get_for_update(self, post_id: str) -> Post | None:
        """Return a post with its row locked until the transaction ends.

        SQLite has no row locks; there the engine opens every transaction
        with ``BEGIN IMMEDIATE``, which locks the whole database instead.
        """
        result = self.session.execute(
            select(Post)
            .where(Post.id == post_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    def adjust_counters(self, post: Post, *, up: int, down: int) -> None:
        """Add ``up``/``down`` to the stored counters in a single UPDATE.

        The arithmetic runs in the database so it never starts from a stale
        in-memory value; ``post`` is refreshed afterwards.
        """
        self.session.execute(
            update(Post)
            .where(Post.id == post.id)
            .values(
                upvotes=Post.upvotes + up,
                downvotes=Post.downvotes + down,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        self.session.refresh(post, attribute_names=["upvotes", "downvotes", "updated_at"])

    def list_for_feed(self, community_id: str | None = None) -> list[Post]:
        """Return feed candidates, newest first.

        Ranking happens in Python, so the full candidate set is loaded and
        pagination is applied after ordering.
        """
        stmt = select(Post).options(selectinload(Post.author), selectinload(Post.community))
        if community_id is not None:
            stmt = stmt.where(Post.community_id == community_id)
        stmt = stmt.order_by(Post.created_at.desc(), Post.id)
        return list(self.session.execute(stmt).scalars())

    def create(self, **fields: object) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(**fields)
        self.session.add(post)
        self.session.flush()
        return post

    def delete(self, post: Post) -> None:
        """Delete ``post``; its votes must already be gone."""
        self.session.delete(post)
        self.session.flush()
