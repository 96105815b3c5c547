"""User Routes — register, look up, rename and delete users.

Invariants:
    - Rename and delete act on the acting user only
    - /username is declared before /{username} so the literal path wins
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.api.dependencies import get_acting_user
from huddle.infrastructure.database import get_db
from huddle.models.user import User
from huddle.schemas.social import UserCreate, UserResponse
from huddle.services.authing import Authing

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    user = await Authing(db).create(body.username)
    await db.commit()
    return {"msg": "User created successfully!", "user": UserResponse.model_validate(user)}


@router.get("", response_model=list[UserResponse])
async def get_users(db: AsyncSession = Depends(get_db)):
    return await Authing(db).get_users()


@router.delete("")
async def delete_user(
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    await Authing(db).delete(user.id)
    await db.commit()
    return {"msg": "You are deleted!"}


@router.patch("/username")
async def update_username(
    body: UserCreate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    user = await Authing(db).update_username(user.id, body.username)
    await db.commit()
    return {"msg": "Updated username!", "user": UserResponse.model_validate(user)}


@router.get("/{username}", response_model=UserResponse)
async def get_user(username: str, db: AsyncSession = Depends(get_db)):
    return await Authing(db).get_by_username(username)
