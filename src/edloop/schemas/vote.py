"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import Field

from .common import CamelModel

VoteType = Literal["up", "down"]


class VoteCreate(CamelModel):
    """Schema for casting a vote; the voter comes from the bearer token."""

    post_id: str = Field(..., min_length=1, description="Post being voted on")
    vote_type: VoteType = Field(..., description="'up' or 'down'")


class VoteResult(CamelModel):
    """Tallies and the caller's vote after a cast."""

    post_id: str
    upvotes: int
    downvotes: int
    user_vote: VoteType | None


class UserVoteResponse(CamelModel):
    """The caller's current vote on a post."""

    post_id: str
    user_vote: VoteType | None
