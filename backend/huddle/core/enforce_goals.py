"""Goal Lifecycle Enforcement — pure rules for the open -> achieved state machine.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a Rejection on violation, None on success
    - amount > 0 (and finite) at creation and on every update
    - progress only grows: deltas must be > 0 and finite; NaN never reaches a row
    - ACHIEVED is terminal: every mutation of an achieved goal is rejected

Design Decisions:
    - Achieved goals are rejected with NOT_ALLOWED (GOAL_ACHIEVED) rather than
      NOT_FOUND: the goal exists, the action is what is forbidden
    - reaches_target() is the single source of truth for the transition condition;
      the SQL CASE in services/goaling.py mirrors it
"""

import math
from uuid import UUID

from huddle.core.domain_types import GoalOwner, GoalStatus
from huddle.core.errors import Rejection, RejectionKind


def goal_not_found(goal_id: UUID) -> Rejection:
    return Rejection(
        RejectionKind.NOT_FOUND, "GOAL_NOT_FOUND", f"Goal {goal_id} does not exist!",
    )


def check_goal_amount(amount: float) -> Rejection | None:
    """Target amount must be a positive, finite number."""
    if not math.isfinite(amount) or amount <= 0:
        return _not_allowed(
            "INVALID_GOAL_AMOUNT",
            f"Goal amount must be positive, got {amount}.",
        )
    return None


def check_progress_delta(delta: float) -> Rejection | None:
    """Progress additions must be strictly positive and finite."""
    if not math.isfinite(delta) or delta <= 0:
        return _not_allowed(
            "INVALID_PROGRESS_DELTA",
            f"Progress must increase by a positive amount, got {delta}.",
        )
    return None


def check_goal_open(goal_id: UUID, status: GoalStatus | str) -> Rejection | None:
    """Mutations are defined only while the goal is open."""
    if GoalStatus(status) is GoalStatus.ACHIEVED:
        return _not_allowed(
            "GOAL_ACHIEVED",
            f"Goal {goal_id} is already achieved and can no longer change!",
        )
    return None


def check_goal_owner(
    goal_id: UUID, goal_owner: GoalOwner, claimed: GoalOwner,
) -> Rejection | None:
    if goal_owner != claimed:
        return _not_allowed(
            "NOT_GOAL_OWNER",
            f"{claimed} is not the owner of goal {goal_id}!",
        )
    return None


def reaches_target(progress: float, amount: float) -> bool:
    return progress >= amount


def _not_allowed(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.NOT_ALLOWED, code, message)
