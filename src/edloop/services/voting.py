"""Pure vote state machine.

A user's vote on a post is one of three states. Casting a kind either
creates a vote, removes it (casting the kind already held), or switches it.
Nothing here touches the database; ``VoteLedger`` applies the result.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from edloop.core.exceptions import VoteValidationError


class VoteKind(str, enum.Enum):
    """Kind of vote a user may cast."""

    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value: str | VoteKind) -> VoteKind:
        """Return the kind for ``value`` or raise ``VoteValidationError``."""
        try:
            return cls(value)
        except ValueError as exc:
            raise VoteValidationError(
                f"Invalid vote type {value!r}; expected 'up' or 'down'"
            ) from exc


@dataclass(frozen=True)
class NoVote:
    """The user holds no vote on the post."""

    kind: None = None


@dataclass(frozen=True)
class Upvoted:
    """The user holds an up vote."""

    kind: VoteKind = VoteKind.UP


@dataclass(frozen=True)
class Downvoted:
    """The user holds a down vote."""

    kind: VoteKind = VoteKind.DOWN


VoteState = NoVote | Upvoted | Downvoted

NO_VOTE = NoVote()
UPVOTED = Upvoted()
DOWNVOTED = Downvoted()


@dataclass(frozen=True)
class CounterDelta:
    """Change to apply to a post's ``upvotes`` and ``downvotes``."""

    up: int = 0
    down: int = 0

    @property
    def total(self) -> int:
        """Change in ``upvotes + downvotes``."""
        return self.up + self.down


def state_for(kind: VoteKind | str | None) -> VoteState:
    """Return the state corresponding to a stored vote kind."""
    if kind is None:
        return NO_VOTE
    if VoteKind.parse(kind) is VoteKind.UP:
        return UPVOTED
    return DOWNVOTED


def _delta_for(kind: VoteKind, step: int) -> CounterDelta:
    if kind is VoteKind.UP:
        return CounterDelta(up=step)
    return CounterDelta(down=step)


def transition(current: VoteState, requested: VoteKind) -> tuple[VoteState, CounterDelta]:
    """Resolve a cast of ``requested`` against the ``current`` state.

    Returns:
        The new state and the counter delta that keeps the post's tallies in
        step with the ledger.
    """
    if isinstance(current, NoVote):
        return state_for(requested), _delta_for(requested, 1)

    if current.kind is requested:
        # Toggle-off.
        return NO_VOTE, _delta_for(requested, -1)

    removed = _delta_for(current.kind, -1)
    added = _delta_for(requested, 1)
    return state_for(requested), CounterDelta(
        up=removed.up + added.up,
        down=removed.down + added.down,
    )
