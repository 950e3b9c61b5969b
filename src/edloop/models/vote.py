"""Models capturing voting interactions on posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from edloop.db.session import Base
from edloop.db.time import utcnow

if TYPE_CHECKING:
    from .post import Post


class Vote(Base):
    """Ledger entry: one user's vote on one post.

    At most one row exists per ``(user_id, post_id)``. Rows disappear with
    their post through the ``ON DELETE CASCADE`` foreign key.
    """

    __tablename__ = "vote"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_vote_user_post"),
        CheckConstraint("kind IN ('up', 'down')", name="ck_vote_kind"),
        Index("ix_vote_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("edloop_user.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )

    # 'up' or 'down'; see edloop.services.voting.VoteKind.
    kind: Mapped[str] = mapped_column(String(4), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    post: Mapped[Post] = relationship("Post", back_populates="votes")
