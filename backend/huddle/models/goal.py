"""Goal ORM — a measurable target owned by a user or a community.

Invariants:
    - status is exactly one of GoalStatus ("open" | "achieved"): the two
      lifecycle partitions are values of one indexed column, never two tables
    - progress >= 0, amount > 0 (checked in core/enforce_goals.py, CHECKed here)
    - achieved_at is NULL while open, set once on the transition
    - owner_id is a user or community id according to owner_kind (no FK)

Design Decisions:
    - Single table + status column: the open -> achieved transition is one
      conditional UPDATE, no delete-then-insert window
    - (status, created_at) index: every listing filters by status, newest first
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Float, DateTime, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from huddle.core.domain_types import GoalOwner, GoalStatus, OwnerKind, MAX_NAME_LENGTH
from huddle.db.base import Base


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_goals_amount_positive"),
        CheckConstraint("progress >= 0", name="ck_goals_progress_non_negative"),
        Index("ix_goals_status_created_at", "status", "created_at"),
        Index("ix_goals_owner", "owner_kind", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    owner_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False,
    )
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=GoalStatus.OPEN.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    target_completion_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    achieved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    @property
    def owner(self) -> GoalOwner:
        return GoalOwner(OwnerKind(self.owner_kind), self.owner_id)

    @property
    def is_open(self) -> bool:
        return self.status == GoalStatus.OPEN.value
