"""Vote ledger: the only writer of per-user votes and post vote counters."""
from __future__ import annotations

import logging
import threading
import zlib
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from edloop.core.exceptions import (
    LedgerStorageError,
    NotFoundError,
    VoteConflictError,
)
from edloop.db.time import utcnow
from edloop.models.post import Post
from edloop.repositories.post_repo import PostRepository
from edloop.repositories.vote_repo import VoteRepository
from edloop.services.voting import (
    CounterDelta,
    NoVote,
    VoteKind,
    state_for,
    transition,
)

logger = logging.getLogger(__name__)

_LOCK_STRIPES = 64
_POST_LOCKS = tuple(threading.Lock() for _ in range(_LOCK_STRIPES))


def post_lock(post_id: str) -> threading.Lock:
    """Return the in-process lock guarding writes to ``post_id``.

    Locks are striped, so unrelated posts occasionally share one; the same
    post always maps to the same lock.
    """
    return _POST_LOCKS[zlib.crc32(post_id.encode("utf-8")) % _LOCK_STRIPES]


@dataclass(frozen=True)
class VoteOutcome:
    """Post tallies and the caller's vote after a cast."""

    post_id: str
    upvotes: int
    downvotes: int
    user_vote: VoteKind | None


class VoteLedger:
    """Applies vote transitions and keeps post counters consistent.

    ``cast_vote`` commits the vote row and the counter change in a single
    transaction and rolls both back on failure.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.posts = PostRepository(session)
        self.votes = VoteRepository(session)

    def cast_vote(self, user_id: str, post_id: str, kind: VoteKind | str) -> VoteOutcome:
        """Cast ``kind`` for ``user_id`` on ``post_id``.

        Raises:
            VoteValidationError: ``kind`` is not ``up`` or ``down``.
            NotFoundError: the post does not exist.
            VoteConflictError: a duplicate ledger row or negative counter
                would result.
            LedgerStorageError: the transaction could not be committed.
        """
        requested = VoteKind.parse(kind)

        with post_lock(post_id):
            try:
                post = self.posts.get_for_update(post_id)
                if post is None:
                    raise NotFoundError("Post not found")
                user_vote = self._apply(user_id, post, requested)
                outcome = VoteOutcome(
                    post_id=post.id,
                    upvotes=post.upvotes,
                    downvotes=post.downvotes,
                    user_vote=user_vote,
                )
                self.session.commit()
            except IntegrityError as exc:
                self.session.rollback()
                logger.error(
                    "Duplicate vote row for user %s on post %s", user_id, post_id,
                    exc_info=True,
                )
                raise VoteConflictError("Vote already recorded for this post") from exc
            except SQLAlchemyError as exc:
                self.session.rollback()
                logger.error("Vote on post %s could not be committed", post_id, exc_info=True)
                raise LedgerStorageError("Failed to process vote") from exc
            except (NotFoundError, VoteConflictError):
                self.session.rollback()
                raise

        return outcome

    def seed_author_vote(self, post: Post) -> None:
        """Record the author's up vote on a freshly created post.

        Runs inside the caller's transaction; nothing is committed here.
        """
        self._apply(post.author_id, post, VoteKind.UP)

    def get_user_vote(self, user_id: str, post_id: str) -> VoteKind | None:
        """Return the kind ``user_id`` currently holds on ``post_id``."""
        vote = self.votes.get(user_id, post_id)
        return VoteKind(vote.kind) if vote is not None else None

    def get_user_votes(self, user_id: str, post_ids: list[str]) -> dict[str, VoteKind]:
        """Return the caller's vote kind for each voted post in ``post_ids``."""
        return {
            post_id: VoteKind(kind)
            for post_id, kind in self.votes.kinds_for_user(user_id, post_ids).items()
        }

    def remove_votes_for_post(self, post_id: str) -> int:
        """Delete every ledger entry for ``post_id``.

        Counters are left alone because the post is about to be deleted. Runs
        inside the caller's transaction.
        """
        removed = self.votes.delete_for_post(post_id)
        logger.debug("Removed %d votes for post %s", removed, post_id)
        return removed

    def _apply(self, user_id: str, post: Post, requested: VoteKind) -> VoteKind | None:
        existing = self.votes.get(user_id, post.id)
        current = state_for(existing.kind if existing is not None else None)
        new_state, delta = transition(current, requested)

        if existing is None:
            self.votes.add(user_id, post.id, requested.value)
        elif isinstance(new_state, NoVote):
            self.votes.remove(existing)
        else:
            existing.kind = requested.value
            existing.updated_at = utcnow()

        self._apply_delta(post, delta)
        logger.debug(
            "Vote %s -> %s by user %s on post %s (delta up=%+d down=%+d)",
            current.kind, new_state.kind, user_id, post.id, delta.up, delta.down,
        )
        return new_state.kind

    def _apply_delta(self, post: Post, delta: CounterDelta) -> None:
        if post.upvotes + delta.up < 0 or post.downvotes + delta.down < 0:
            raise VoteConflictError(
                f"Vote counters for post {post.id} would become negative"
            )
        self.posts.adjust_counters(post, up=delta.up, down=delta.down)
