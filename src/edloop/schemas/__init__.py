"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .community import CommunityCreate, CommunityResponse, CommunitySummary
from .post import NoteFile, PostCreate, PostResponse, PostUpdate
from .user import AuthorSummary, ProfileUpdateRequest, UserProfile
from .vote import UserVoteResponse, VoteCreate, VoteResult

__all__ = [
    "CommunityCreate", "CommunityResponse", "CommunitySummary",
    "NoteFile", "PostCreate", "PostResponse", "PostUpdate",
    "AuthorSummary", "ProfileUpdateRequest", "UserProfile",
    "UserVoteResponse", "VoteCreate", "VoteResult",
]
