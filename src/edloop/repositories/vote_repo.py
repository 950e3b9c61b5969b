"""Data access helpers for vote ledger rows."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from edloop.models.vote import Vote

__all__ = ["VoteRepository"]


class VoteRepository:
    """Reads and writes ``Vote`` rows; callers own the transaction."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str, post_id: str) -> Vote | None:
        """Return the vote ``user_id`` holds on ``post_id``, if any."""
        result = self.session.execute(
            select(Vote).where(Vote.user_id == user_id, Vote.post_id == post_id)
        )
        return result.scalars().first()

    def add(self, user_id: str, post_id: str, kind: str) -> Vote:
        """Insert a ledger row and flush so unique violations surface here."""
        vote = Vote(user_id=user_id, post_id=post_id, kind=kind)
        self.session.add(vote)
        self.session.flush()
        return vote

    def remove(self, vote: Vote) -> None:
        self.session.delete(vote)
        self.session.flush()

    def delete_for_post(self, post_id: str) -> int:
        """Delete every vote on ``post_id`` and return how many went."""
        result = self.session.execute(
            delete(Vote)
            .where(Vote.post_id == post_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    def count_by_kind(self, post_id: str) -> dict[str, int]:
        """Return ``{'up': n, 'down': m}`` tallied from the ledger."""
        rows = self.session.execute(
            select(Vote.kind, func.count())
            .where(Vote.post_id == post_id)
            .group_by(Vote.kind)
        ).all()
        counts = {"up": 0, "down": 0}
        for kind, total in rows:
            counts[kind] = total
        return counts

    def kinds_for_user(self, user_id: str, post_ids: list[str]) -> dict[str, str]:
        """Return ``{post_id: kind}`` for the posts ``user_id`` has voted on."""
        if not post_ids:
            return {}
        rows = self.session.execute(
            select(Vote.post_id, Vote.kind).where(
                Vote.user_id == user_id,
                Vote.post_id.in_(post_ids),
            )
        ).all()
        return {post_id: kind for post_id, kind in rows}
