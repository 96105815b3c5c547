"""Community ORM — community record plus its member set and linked-post set.

Invariants:
    - (community_id, user_id) is the primary key of community_members:
      a user appears at most once in a member set
    - post_id is unique in community_posts: a post is linked into at most one community
    - user_id / post_id are ids of other concepts (no FK); community_id is an
      FK inside this concept and cascades on delete

Design Decisions:
    - Member and post sets as association tables instead of array columns:
      the uniqueness invariants become database keys, and join races fail on
      the key instead of silently duplicating a member
    - lazy="selectin": every read of a community needs both sets
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from huddle.core.domain_types import MAX_NAME_LENGTH
from huddle.db.base import Base


class Community(Base):
    __tablename__ = "communities"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH), nullable=False, index=True,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    memberships: Mapped[list["CommunityMember"]] = relationship(
        "CommunityMember", back_populates="community",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="CommunityMember.joined_at",
    )
    post_links: Mapped[list["CommunityPost"]] = relationship(
        "CommunityPost", back_populates="community",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="CommunityPost.linked_at",
    )

    @property
    def members(self) -> list[uuid.UUID]:
        return [m.user_id for m in self.memberships]

    @property
    def posts(self) -> list[uuid.UUID]:
        return [p.post_id for p in self.post_links]


class CommunityMember(Base):
    __tablename__ = "community_members"

    community_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("communities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, index=True,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    community: Mapped["Community"] = relationship(
        "Community", back_populates="memberships",
    )


class CommunityPost(Base):
    __tablename__ = "community_posts"

    community_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("communities.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, unique=True,
    )
    linked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    community: Mapped["Community"] = relationship(
        "Community", back_populates="post_links",
    )
