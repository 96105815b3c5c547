"""Friendships and friend requests.

Revision ID: 002_friending
Revises: 001_initial
Create Date: 2026-10-19

Friendships store each pair once (user1_id < user2_id). Friend requests keep
their row after being answered; only one pending request per direction.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


revision: str = "002_friending"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "friendships",
        sa.Column("user1_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user2_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_friendships_user2_id", "friendships", ["user2_id"])

    op.create_table(
        "friend_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("from_id", UUID(as_uuid=True), nullable=False),
        sa.Column("to_id", UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("answered_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "uq_friend_requests_pending", "friend_requests", ["from_id", "to_id"],
        unique=True, postgresql_where=sa.text("status = 'pending'"),
    )
    op.create_index("ix_friend_requests_to_id", "friend_requests", ["to_id"])


def downgrade() -> None:
    op.drop_table("friend_requests")
    op.drop_table("friendships")
