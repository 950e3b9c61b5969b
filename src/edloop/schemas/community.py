"""Community-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class CommunityCreate(CamelModel):
    """Schema for creating a new community."""

    name: str = Field(..., min_length=2, max_length=50, pattern=r"^[a-z0-9][a-z0-9_-]*$")
    display_name: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=1000)
    category: str | None = Field(None, max_length=50)


class CommunityResponse(CamelModel):
    """Schema for community information returned by the API."""

    id: str
    name: str
    display_name: str
    description: str
    category: str | None
    created_by: str | None
    created_at: datetime


class CommunitySummary(CamelModel):
    """Community reference embedded in post responses."""

    id: str
    name: str
    display_name: str
