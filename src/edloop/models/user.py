"""SQLAlchemy model for user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from edloop.db.ids import new_id
from edloop.db.session import Base
from edloop.db.time import utcnow


class User(Base):
    """Account provisioned by the authentication service.

    This service never writes credentials; it resolves the user id carried in
    a bearer token and lets the user edit their public profile.
    """

    __tablename__ = "edloop_user"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    university: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Public profile, editable through PUT /users/me.
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    interests: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    domain: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    karma: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
