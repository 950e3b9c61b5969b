"""SQLAlchemy model for topical communities."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from edloop.db.ids import new_id
from edloop.db.session import Base
from edloop.db.time import utcnow


class Community(Base):
    """Community metadata used for grouping posts."""

    __tablename__ = "community"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    # URL-safe handle, unique across the instance.
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_by: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("edloop_user.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
