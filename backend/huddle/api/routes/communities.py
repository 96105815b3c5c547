"""Community Routes — create, list, join and leave communities.

Invariants:
    - The creator is the first member
    - join by a member / leave by a non-member → 403 (NotAllowedError)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.api.dependencies import get_acting_user
from huddle.infrastructure.database import get_db
from huddle.models.user import User
from huddle.schemas.social import CommunityCreate, CommunityResponse
from huddle.services.communitying import CommunityMembership

router = APIRouter(prefix="/api/v1/communities", tags=["communities"])


@router.get("", response_model=list[CommunityResponse])
async def get_communities(db: AsyncSession = Depends(get_db)):
    return await CommunityMembership(db).get_all()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_community(
    body: CommunityCreate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    community = await CommunityMembership(db).create(body.name, body.description, user.id)
    await db.commit()
    return {
        "msg": "Community successfully created!",
        "community": CommunityResponse.model_validate(community),
    }


@router.get("/user/{user_id}", response_model=list[CommunityResponse])
async def get_communities_by_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    return await CommunityMembership(db).get_by_member(user_id)


@router.get("/{name}", response_model=list[CommunityResponse])
async def get_community_by_name(name: str, db: AsyncSession = Depends(get_db)):
    return await CommunityMembership(db).get_by_name(name)


@router.put("/join/{community_id}")
async def join_community(
    community_id: UUID,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    community = await CommunityMembership(db).join(community_id, user.id)
    await db.commit()
    return {
        "msg": "User successfully joined community!",
        "community": CommunityResponse.model_validate(community),
    }


@router.put("/leave/{community_id}")
async def leave_community(
    community_id: UUID,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    community = await CommunityMembership(db).leave(community_id, user.id)
    await db.commit()
    return {
        "msg": "User successfully left community!",
        "community": CommunityResponse.model_validate(community),
    }
