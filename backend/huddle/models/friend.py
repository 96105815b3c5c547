"""Friend ORM — friendships and the requests that create them.

Invariants:
    - A friendship row stores its pair in canonical order (user1_id < user2_id),
      so (a, b) and (b, a) hit the same primary key
    - At most one PENDING request per (from_id, to_id): partial unique index
    - Answered requests keep their row with status accepted/rejected

Design Decisions:
    - user ids are plain UUID columns (no FK to users): a deleted user leaves
      its friendships behind and listings show it as DELETED_USER
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Index, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from huddle.core.domain_types import FriendRequestStatus
from huddle.db.base import Base

_PENDING_ONLY = text(f"status = '{FriendRequestStatus.PENDING.value}'")


class Friendship(Base):
    __tablename__ = "friendships"
    __table_args__ = (
        Index("ix_friendships_user2_id", "user2_id"),
    )

    user1_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    user2_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    @classmethod
    def between(cls, a: uuid.UUID, b: uuid.UUID) -> "Friendship":
        first, second = sorted((a, b))
        return cls(user1_id=first, user2_id=second)

    def other(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.user2_id if self.user1_id == user_id else self.user1_id


class FriendRequest(Base):
    __tablename__ = "friend_requests"
    __table_args__ = (
        Index(
            "uq_friend_requests_pending", "from_id", "to_id",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
        Index("ix_friend_requests_to_id", "to_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    from_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    to_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FriendRequestStatus.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    answered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
