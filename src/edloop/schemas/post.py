"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from .common import CamelModel
from .community import CommunitySummary
from .user import AuthorSummary

PostType = Literal["text", "link", "image", "note"]

_REQUIRED_PAYLOAD = {
    "text": ("content", "Content is required for text posts"),
    "link": ("link_url", "Link URL is required for link posts"),
    "image": ("image_url", "Image URL is required for image posts"),
    "note": ("note_file", "Note file is required for note posts"),
}


def missing_payload(post_type: str, fields: dict[str, object]) -> str | None:
    """Return why ``fields`` lack the payload ``post_type`` needs, or ``None``."""
    field, message = _REQUIRED_PAYLOAD[post_type]
    return None if fields.get(field) else message


class NoteFile(CamelModel):
    """Uploaded note attachment; the file itself lives on the CDN."""

    name: str | None = None
    url: str


class PostCreate(CamelModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300)
    content: str | None = Field(None, max_length=10000)
    type: PostType = "text"
    community_id: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)
    link_url: str | None = None
    image_url: str | None = None
    note_file: NoteFile | None = None

    @model_validator(mode="after")
    def _check_type_payload(self) -> "PostCreate":
        self.title = self.title.strip()
        if not self.title:
            raise ValueError("Title must not be blank")
        problem = missing_payload(
            self.type,
            {
                "content": self.content,
                "link_url": self.link_url,
                "image_url": self.image_url,
                "note_file": self.note_file,
            },
        )
        if problem:
            raise ValueError(problem)
        return self


class PostUpdate(CamelModel):
    """Partial update applied by the post's author."""

    title: str | None = Field(None, min_length=1, max_length=300)
    content: str | None = Field(None, min_length=1, max_length=10000)
    type: PostType | None = None
    tags: list[str] | None = None
    link_url: str | None = None
    image_url: str | None = None

    @model_validator(mode="after")
    def _reject_nulls(self) -> "PostUpdate":
        for name in ("title", "type", "tags"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        if self.title is not None:
            self.title = self.title.strip()
            if not self.title:
                raise ValueError("Title must not be blank")
        return self


class PostResponse(CamelModel):
    """Schema for post information returned by the API."""

    id: str
    title: str
    content: str | None
    type: PostType
    author_id: str
    community_id: str
    author: AuthorSummary | None = None
    community: CommunitySummary | None = None
    upvotes: int
    downvotes: int
    comment_count: int
    tags: list[str]
    link_url: str | None
    image_url: str | None
    note_file: NoteFile | None
    created_at: datetime
    updated_at: datetime
    user_vote: Literal["up", "down"] | None = None
