"""Posting — free-text posts. Knows nothing about communities.

Invariants:
    - Only the author may update or delete a post (assert_author)
    - Listings are newest first
"""

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.enforce_authorship import check_is_author, item_not_found
from huddle.core.errors import raise_for
from huddle.models.post import Post

logger = logging.getLogger(__name__)


class Posting:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, author_id: UUID, content: str) -> Post:
        post = Post(author_id=author_id, content=content)
        self.db.add(post)
        await self.db.flush()
        logger.info("Post created", extra={"post_id": post.id, "user_id": author_id})
        return post

    async def get_posts(self) -> list[Post]:
        result = await self.db.execute(
            select(Post).order_by(Post.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_by_author(self, author_id: UUID) -> list[Post]:
        result = await self.db.execute(
            select(Post)
            .where(Post.author_id == author_id)
            .order_by(Post.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get(self, post_id: UUID) -> Post:
        post = await self.db.get(Post, post_id)
        if post is None:
            raise_for(item_not_found("post", post_id))
        return post

    async def existing_ids(self, post_ids: Iterable[UUID]) -> set[UUID]:
        ids = list(post_ids)
        if not ids:
            return set()
        result = await self.db.execute(select(Post.id).where(Post.id.in_(ids)))
        return set(result.scalars().all())

    async def get_ids(self) -> set[UUID]:
        result = await self.db.execute(select(Post.id))
        return set(result.scalars().all())

    async def update(self, post_id: UUID, content: str | None = None) -> Post:
        post = await self.get(post_id)
        if content is not None:
            post.content = content
            await self.db.flush()
        return post

    async def delete(self, post_id: UUID) -> None:
        post = await self.get(post_id)
        await self.db.delete(post)
        await self.db.flush()
        logger.info("Post deleted", extra={"post_id": post_id})

    async def assert_exists(self, post_id: UUID) -> None:
        await self.get(post_id)

    async def assert_author(self, post_id: UUID, user_id: UUID) -> None:
        post = await self.get(post_id)
        raise_for(check_is_author("post", post_id, post.author_id, user_id))
