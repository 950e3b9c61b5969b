"""Identifier generation for ORM rows."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Return a new opaque identifier."""
    return uuid.uuid4().hex
