"""Goal Schemas — creation, update and progress payloads.

Invariants:
    - amount > 0 and progress > 0 are validated here first; core/enforce_goals.py
      re-checks them for callers that bypass HTTP
    - deadline is the target completion date
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from huddle.core.domain_types import MAX_NAME_LENGTH


class GoalCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    unit: str = Field(min_length=1, max_length=50)
    amount: float = Field(gt=0)
    deadline: datetime


class CommunityGoalCreate(GoalCreate):
    community_id: UUID


class GoalUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    unit: str | None = Field(None, min_length=1, max_length=50)
    amount: float | None = Field(None, gt=0)
    deadline: datetime | None = None


class GoalProgress(BaseModel):
    progress: float = Field(gt=0)


class GoalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_kind: str
    owner_id: UUID
    name: str
    unit: str
    amount: float
    progress: float
    status: str
    created_at: datetime
    target_completion_date: datetime
    achieved_at: datetime | None = None
