"""user profile fields

Revision ID: 0002_user_profile
Revises: 0001_initial_schema
Create Date: 2026-10-19 15:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002_user_profile"
down_revision: Union[str, Sequence[str], None] = "0001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_PROFILE_COLUMNS = ("bio", "interests", "domain", "avatar_url", "verified", "karma")


def upgrade() -> None:
    """Add the public profile shown on user pages and post bylines."""
    with op.batch_alter_table("edloop_user") as batch_op:
        batch_op.add_column(sa.Column("bio", sa.Text(), nullable=True))
        batch_op.add_column(
            sa.Column("interests", sa.JSON(), nullable=False, server_default="[]")
        )
        batch_op.add_column(
            sa.Column("domain", sa.String(length=100), nullable=False, server_default="")
        )
        batch_op.add_column(sa.Column("avatar_url", sa.Text(), nullable=True))
        batch_op.add_column(
            sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false())
        )
        batch_op.add_column(
            sa.Column("karma", sa.Integer(), nullable=False, server_default="0")
        )


def downgrade() -> None:
    """Drop the profile columns."""
    with op.batch_alter_table("edloop_user") as batch_op:
        for column in reversed(_PROFILE_COLUMNS):
            batch_op.drop_column(column)
