"""Goal Routes — user and community goals, progress, and open/achieved listings.

Invariants:
    - User goals are managed by their owner only; community goals by any member
    - Progress, update and delete on an achieved goal → 403 (GOAL_ACHIEVED)
    - Listing routes are registered before /{goal_id} so they are never parsed as ids

Design Decisions:
    - "incomplete"/"complete" path segments kept from the public API; they map
      to the open/achieved partitions
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.api.dependencies import get_acting_user
from huddle.core.domain_types import GoalOwner, OwnerKind
from huddle.infrastructure.database import get_db
from huddle.models.user import User
from huddle.schemas.goal import (
    CommunityGoalCreate, GoalCreate, GoalProgress, GoalResponse, GoalUpdate,
)
from huddle.services.goaling import GoalLifecycle
from huddle.services.synchronize import Synchronizations

router = APIRouter(prefix="/api/v1/goals", tags=["goals"])


# ─── Listings ───────────────────────────────────────────────────

@router.get("/incomplete", response_model=list[GoalResponse])
async def get_incomplete_goals(db: AsyncSession = Depends(get_db)):
    return await GoalLifecycle(db).get_open()


@router.get("/complete", response_model=list[GoalResponse])
async def get_complete_goals(db: AsyncSession = Depends(get_db)):
    return await GoalLifecycle(db).get_achieved()


@router.get("/incomplete/{kind}/{owner_id}", response_model=list[GoalResponse])
async def get_incomplete_goals_by_owner(
    kind: OwnerKind, owner_id: UUID, db: AsyncSession = Depends(get_db),
):
    return await GoalLifecycle(db).get_open_by_owner(GoalOwner(kind, owner_id))


@router.get("/complete/{kind}/{owner_id}", response_model=list[GoalResponse])
async def get_complete_goals_by_owner(
    kind: OwnerKind, owner_id: UUID, db: AsyncSession = Depends(get_db),
):
    return await GoalLifecycle(db).get_achieved_by_owner(GoalOwner(kind, owner_id))


# ─── Creation ───────────────────────────────────────────────────

@router.post("/user", status_code=status.HTTP_201_CREATED)
async def create_user_goal(
    body: GoalCreate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await GoalLifecycle(db).create(
        GoalOwner(OwnerKind.USER, user.id),
        body.name, body.unit, body.amount, body.deadline,
    )
    await db.commit()
    return {"msg": "Goal successfully created!", "goal": GoalResponse.model_validate(goal)}


@router.post("/community", status_code=status.HTTP_201_CREATED)
async def create_community_goal(
    body: CommunityGoalCreate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    goal = await Synchronizations(db).create_community_goal(
        user.id, body.community_id,
        body.name, body.unit, body.amount, body.deadline,
    )
    return {"msg": "Goal successfully created!", "goal": GoalResponse.model_validate(goal)}


# ─── Single goal ────────────────────────────────────────────────

@router.get("/{goal_id}", response_model=GoalResponse)
async def get_goal(goal_id: UUID, db: AsyncSession = Depends(get_db)):
    return await GoalLifecycle(db).get(goal_id)


@router.patch("/{kind}/progress/{goal_id}")
async def add_goal_progress(
    kind: OwnerKind,
    goal_id: UUID,
    body: GoalProgress,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    await Synchronizations(db).assert_can_manage_goal(user.id, goal_id, kind)
    goal = await GoalLifecycle(db).add_progress(goal_id, body.progress)
    await db.commit()
    return {"msg": "Progress added successfully!", "goal": GoalResponse.model_validate(goal)}


@router.patch("/{kind}/{goal_id}")
async def update_goal(
    kind: OwnerKind,
    goal_id: UUID,
    body: GoalUpdate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    await Synchronizations(db).assert_can_manage_goal(user.id, goal_id, kind)
    goal = await GoalLifecycle(db).update(
        goal_id,
        name=body.name,
        unit=body.unit,
        amount=body.amount,
        target_completion_date=body.deadline,
    )
    await db.commit()
    return {"msg": "Goal updated successfully!", "goal": GoalResponse.model_validate(goal)}


@router.delete("/{kind}/{goal_id}")
async def delete_goal(
    kind: OwnerKind,
    goal_id: UUID,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    await Synchronizations(db).assert_can_manage_goal(user.id, goal_id, kind)
    await GoalLifecycle(db).delete_open(goal_id)
    await db.commit()
    return {"msg": "Goal deleted successfully!"}
