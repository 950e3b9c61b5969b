"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from .common import CamelModel


class AuthorSummary(CamelModel):
    """Byline embedded in post responses."""

    id: str
    username: str
    display_name: str
    university: str | None
    verified: bool
    karma: int
    join_date: datetime


class UserProfile(AuthorSummary):
    """Public profile returned by the users endpoints."""

    bio: str | None
    interests: list[str]
    domain: str
    avatar: str | None


class ProfileUpdateRequest(CamelModel):
    """Fields a user may change on their own profile."""

    bio: str | None = Field(None, max_length=500)
    interests: list[str] | None = Field(None, max_length=20)
    domain: str | None = Field(None, max_length=100)
    university: str | None = Field(None, max_length=200)

    @field_validator("interests")
    @classmethod
    def validate_interests(cls, v: list[str] | None) -> list[str]:
        """Strip entries, drop blanks and duplicates; ``null`` clears the list."""
        if v is None:
            return []
        cleaned: list[str] = []
        for item in v:
            item = item.strip()
            if item and item not in cleaned:
                cleaned.append(item)
        return cleaned

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str | None) -> str:
        """``null`` clears the domain."""
        return (v or "").strip()
