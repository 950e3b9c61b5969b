"""Business logic services for the EdLoop application."""

from .ranking import SortStrategy, parse_strategy, rank
from .vote_ledger import VoteLedger, VoteOutcome
from .voting import VoteKind, transition

__all__ = [
    "SortStrategy", "parse_strategy", "rank",
    "VoteLedger", "VoteOutcome",
    "VoteKind", "transition",
]
