"""Comment Routes — comments on existing posts."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.api.dependencies import get_acting_user
from huddle.infrastructure.database import get_db
from huddle.models.user import User
from huddle.schemas.social import CommentCreate, CommentResponse, CommentUpdate
from huddle.services.commenting import Commenting
from huddle.services.synchronize import Synchronizations

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.get("", response_model=list[CommentResponse])
async def get_comments(
    target: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    if target:
        return await Commenting(db).get_by_target(target)
    return await Commenting(db).get_comments()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_comment(
    body: CommentCreate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await Synchronizations(db).create_comment(user.id, body.content, body.target)
    return {
        "msg": "Comment successfully created!",
        "comment": CommentResponse.model_validate(comment),
    }


@router.patch("/{comment_id}")
async def update_comment(
    comment_id: UUID,
    body: CommentUpdate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    commenting = Commenting(db)
    await commenting.assert_author(comment_id, user.id)
    comment = await commenting.update(comment_id, body.content)
    await db.commit()
    return {
        "msg": "Comment successfully updated!",
        "comment": CommentResponse.model_validate(comment),
    }


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    commenting = Commenting(db)
    await commenting.assert_author(comment_id, user.id)
    await commenting.delete(comment_id)
    await db.commit()
    return {"msg": "Comment deleted successfully!"}
