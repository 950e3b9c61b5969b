"""Vote-related endpoints for the EdLoop API."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from edloop.services.vote_ledger import VoteLedger
from edloop.schemas.vote import UserVoteResponse, VoteCreate, VoteResult

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/votes", tags=["votes"])


def get_vote_ledger(db: SessionDep) -> VoteLedger:
    """Return a ledger bound to the request's session."""
    return VoteLedger(db)


VoteLedgerDep = Annotated[VoteLedger, Depends(get_vote_ledger)]


@router.post("/", response_model=VoteResult, status_code=status.HTTP_200_OK)
async def cast_vote(
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    ledger: VoteLedgerDep,
) -> VoteResult:
    """Cast, switch or withdraw a vote on a post.

    Casting the kind the caller already holds removes the vote.
    """
    outcome = ledger.cast_vote(current_user.id, vote_data.post_id, vote_data.vote_type)
    return VoteResult(
        post_id=outcome.post_id,
        upvotes=outcome.upvotes,
        downvotes=outcome.downvotes,
        user_vote=outcome.user_vote.value if outcome.user_vote else None,
    )


@router.get("/post/{post_id}", response_model=UserVoteResponse)
async def get_my_vote(
    post_id: str,
    current_user: CurrentUserDep,
    ledger: VoteLedgerDep,
) -> UserVoteResponse:
    """Get current user's vote on a specific post."""
    kind = ledger.get_user_vote(current_user.id, post_id)
    return UserVoteResponse(post_id=post_id, user_vote=kind.value if kind else None)
