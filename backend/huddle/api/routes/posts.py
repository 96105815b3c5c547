"""Post Routes — creation and deletion run as synchronizations with communities.

Invariants:
    - POST requires membership of the target community and links the post into it
    - DELETE unlinks the post from its community in the same transaction
    - Only the author may PATCH or DELETE
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.api.dependencies import get_acting_user
from huddle.infrastructure.database import get_db
from huddle.models.user import User
from huddle.schemas.social import PostCreate, PostResponse, PostUpdate
from huddle.services.authing import Authing
from huddle.services.posting import Posting
from huddle.services.synchronize import Synchronizations

router = APIRouter(prefix="/api/v1/posts", tags=["posts"])


@router.get("", response_model=list[PostResponse])
async def get_posts(
    author: str | None = Query(None, min_length=1),
    db: AsyncSession = Depends(get_db),
):
    """All posts, or those of one author (by username)."""
    if author:
        user = await Authing(db).get_by_username(author)
        return await Posting(db).get_by_author(user.id)
    return await Posting(db).get_posts()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    post = await Synchronizations(db).create_post(user.id, body.content, body.community_id)
    return {"msg": "Post successfully created!", "post": PostResponse.model_validate(post)}


@router.patch("/{post_id}")
async def update_post(
    post_id: UUID,
    body: PostUpdate,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    posting = Posting(db)
    await posting.assert_author(post_id, user.id)
    post = await posting.update(post_id, body.content)
    await db.commit()
    return {"msg": "Post successfully updated!", "post": PostResponse.model_validate(post)}


@router.delete("/{post_id}")
async def delete_post(
    post_id: UUID,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    community_id = await Synchronizations(db).delete_post(user.id, post_id)
    return {
        "msg": "Post deleted successfully!",
        "community_id": str(community_id) if community_id else None,
    }
