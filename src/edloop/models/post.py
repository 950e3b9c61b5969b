"""SQLAlchemy model for posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edloop.db.ids import new_id
from edloop.db.session import Base
from edloop.db.time import utcnow

if TYPE_CHECKING:
    from .community import Community
    from .user import User
    from .vote import Vote

POST_TYPES = ("text", "link", "image", "note")


class Post(Base):
    """Primary content entity produced by users.

    ``upvotes`` and ``downvotes`` are a cache of the vote ledger and are only
    written by ``VoteLedger``.
    """

    __tablename__ = "post"
    __table_args__ = (
        CheckConstraint("upvotes >= 0", name="ck_post_upvotes_non_negative"),
        CheckConstraint("downvotes >= 0", name="ck_post_downvotes_non_negative"),
        CheckConstraint(
            "type IN ('text', 'link', 'image', 'note')", name="ck_post_type"
        ),
        Index("ix_post_community_created", "community_id", "created_at"),
        Index("ix_post_author_created", "author_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    author_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("edloop_user.id"),
        nullable=False,
    )
    community_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("community.id"),
        nullable=False,
    )

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="text")
    link_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    note_file_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    note_file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    comment_count: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    author: Mapped[User] = relationship("User")
    community: Mapped[Community] = relationship("Community")
    votes: Mapped[list[Vote]] = relationship(
        "Vote",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
