"""Goal Lifecycle — owns goals and the one-way open -> achieved transition.

Invariants:
    - A goal row is in exactly one partition (status column) at all times
    - Every mutation is a conditional UPDATE/DELETE guarded by status = 'open';
      a zero rowcount is resolved into NotFound (no such goal) or NotAllowed (achieved)
    - add_progress increments and transitions in ONE statement: concurrent
      increments never drop each other and the transition cannot be half-done
    - Methods flush but never commit: the caller owns the unit of work

Design Decisions:
    - synchronize_session=False on bulk statements + populate_existing on reads:
      the identity map is refreshed from the row after every conditional write
    - The SQL CASE in add_progress mirrors reaches_target() in core/enforce_goals.py
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import DateTime, select, update, delete, case, literal
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.domain_types import GoalOwner, GoalStatus
from huddle.core.enforce_goals import (
    check_goal_amount,
    check_goal_open,
    check_goal_owner,
    check_progress_delta,
    goal_not_found,
    reaches_target,
)
from huddle.core.errors import raise_for
from huddle.models.goal import Goal

logger = logging.getLogger(__name__)

_OPEN = GoalStatus.OPEN.value
_ACHIEVED = GoalStatus.ACHIEVED.value


class GoalLifecycle:
    """Goal concept: create, query, progress and transition goals."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self,
        owner: GoalOwner,
        name: str,
        unit: str,
        amount: float,
        target_completion_date: datetime,
    ) -> Goal:
        """Create an open goal with zero progress."""
        raise_for(check_goal_amount(amount))
        goal = Goal(
            owner_kind=owner.kind.value,
            owner_id=owner.id,
            name=name,
            unit=unit,
            amount=amount,
            progress=0.0,
            status=_OPEN,
            target_completion_date=target_completion_date,
        )
        self.db.add(goal)
        await self.db.flush()
        logger.info(
            f"Goal created for {owner}",
            extra={"goal_id": goal.id, "status": _OPEN},
        )
        return goal

    # ─── Queries ────────────────────────────────────────────────

    async def get_open(self) -> list[Goal]:
        return await self._list(_OPEN)

    async def get_achieved(self) -> list[Goal]:
        return await self._list(_ACHIEVED)

    async def get_open_by_owner(self, owner: GoalOwner) -> list[Goal]:
        return await self._list(_OPEN, owner)

    async def get_achieved_by_owner(self, owner: GoalOwner) -> list[Goal]:
        return await self._list(_ACHIEVED, owner)

    async def get(self, goal_id: UUID) -> Goal:
        """Look up a goal in either partition."""
        goal = await self._find(goal_id)
        if goal is None:
            raise_for(goal_not_found(goal_id))
        return goal

    async def assert_owner(self, goal_id: UUID, owner: GoalOwner) -> None:
        """Precondition for managing a goal: it is open and belongs to owner.

        An achieved goal fails with GOAL_ACHIEVED before ownership is compared,
        so owner and non-owner see the same answer.
        """
        goal = await self.get(goal_id)
        raise_for(check_goal_open(goal_id, goal.status))
        raise_for(check_goal_owner(goal_id, goal.owner, owner))

    # ─── Mutations (open goals only) ────────────────────────────

    async def update(
        self,
        goal_id: UUID,
        name: str | None = None,
        unit: str | None = None,
        amount: float | None = None,
        target_completion_date: datetime | None = None,
    ) -> Goal:
        """Update the given fields of an open goal.

        Lowering the amount to or below the current progress achieves the goal.
        """
        fields: dict = {}
        if name is not None:
            fields["name"] = name
        if unit is not None:
            fields["unit"] = unit
        if amount is not None:
            raise_for(check_goal_amount(amount))
            fields["amount"] = amount
        if target_completion_date is not None:
            fields["target_completion_date"] = target_completion_date

        if fields:
            result = await self.db.execute(
                update(Goal)
                .where(Goal.id == goal_id, Goal.status == _OPEN)
                .values(**fields)
                .execution_options(synchronize_session=False),
            )
            if result.rowcount == 0:
                await self._raise_not_open(goal_id)
        else:
            await self._raise_not_open(goal_id)

        goal = await self.get(goal_id)
        if goal.is_open and reaches_target(goal.progress, goal.amount):
            goal = await self.transition_to_achieved(goal_id)
        return goal

    async def add_progress(self, goal_id: UUID, delta: float) -> Goal:
        """Add delta to an open goal's progress, achieving it on reaching the amount."""
        raise_for(check_progress_delta(delta))
        new_progress = Goal.progress + delta
        reached = new_progress >= Goal.amount
        result = await self.db.execute(
            update(Goal)
            .where(Goal.id == goal_id, Goal.status == _OPEN)
            .values(
                progress=new_progress,
                status=case((reached, _ACHIEVED), else_=Goal.status),
                achieved_at=case(
                    (reached, literal(datetime.now(timezone.utc), DateTime(timezone=True))),
                    else_=Goal.achieved_at,
                ),
            )
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self._raise_not_open(goal_id)

        goal = await self.get(goal_id)
        if not goal.is_open:
            logger.info(
                f"Goal achieved at {goal.progress}/{goal.amount} {goal.unit}",
                extra={"goal_id": goal_id, "status": _ACHIEVED},
            )
        return goal

    async def transition_to_achieved(self, goal_id: UUID) -> Goal:
        """Move an open goal to the achieved partition."""
        result = await self.db.execute(
            update(Goal)
            .where(Goal.id == goal_id, Goal.status == _OPEN)
            .values(status=_ACHIEVED, achieved_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self._raise_not_open(goal_id)
        logger.info("Goal achieved", extra={"goal_id": goal_id, "status": _ACHIEVED})
        return await self.get(goal_id)

    async def transition_reached(self) -> list[UUID]:
        """Achieve every open goal whose progress already meets its amount.

        Repairs rows written before the single-statement transition existed.
        """
        result = await self.db.execute(
            select(Goal.id).where(
                Goal.status == _OPEN, Goal.progress >= Goal.amount,
            ),
        )
        ids = list(result.scalars().all())
        for goal_id in ids:
            await self.transition_to_achieved(goal_id)
        return ids

    async def delete_open(self, goal_id: UUID) -> None:
        result = await self.db.execute(
            delete(Goal)
            .where(Goal.id == goal_id, Goal.status == _OPEN)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await self._raise_not_open(goal_id)
        logger.info("Goal deleted", extra={"goal_id": goal_id})

    # ─── Helpers ────────────────────────────────────────────────

    async def _find(self, goal_id: UUID) -> Goal | None:
        result = await self.db.execute(
            select(Goal)
            .where(Goal.id == goal_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def _list(self, status: str, owner: GoalOwner | None = None) -> list[Goal]:
        query = select(Goal).where(Goal.status == status)
        if owner is not None:
            query = query.where(
                Goal.owner_kind == owner.kind.value, Goal.owner_id == owner.id,
            )
        query = query.order_by(Goal.created_at.desc()).execution_options(
            populate_existing=True,
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _raise_not_open(self, goal_id: UUID) -> None:
        """Explain why a status-guarded statement matched no row."""
        goal = await self.get(goal_id)
        raise_for(check_goal_open(goal_id, goal.status))
