"""Commenting — comments targeting posts by id.

Invariants:
    - Target existence is checked by the synchronization that creates the comment
    - Only the author may update or delete a comment
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.enforce_authorship import check_is_author, item_not_found
from huddle.core.errors import raise_for
from huddle.models.comment import Comment

logger = logging.getLogger(__name__)


class Commenting:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, author_id: UUID, content: str, target_id: UUID) -> Comment:
        comment = Comment(author_id=author_id, content=content, target_id=target_id)
        self.db.add(comment)
        await self.db.flush()
        logger.info(
            "Comment created",
            extra={"comment_id": comment.id, "post_id": target_id, "user_id": author_id},
        )
        return comment

    async def get_comments(self) -> list[Comment]:
        result = await self.db.execute(
            select(Comment).order_by(Comment.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_by_target(self, target_id: UUID) -> list[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.target_id == target_id)
            .order_by(Comment.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get(self, comment_id: UUID) -> Comment:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise_for(item_not_found("comment", comment_id))
        return comment

    async def update(self, comment_id: UUID, content: str | None = None) -> Comment:
        comment = await self.get(comment_id)
        if content is not None:
            comment.content = content
            await self.db.flush()
        return comment

    async def delete(self, comment_id: UUID) -> None:
        comment = await self.get(comment_id)
        await self.db.delete(comment)
        await self.db.flush()

    async def assert_author(self, comment_id: UUID, user_id: UUID) -> None:
        comment = await self.get(comment_id)
        raise_for(check_is_author("comment", comment_id, comment.author_id, user_id))
