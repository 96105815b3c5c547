"""Authing — user identities (username only; credentials live elsewhere).

Invariants:
    - Usernames are unique, on create and on rename
    - get_by_id is how every route resolves its acting user
    - usernames() never fails on a missing id: it answers DELETED_USER
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.enforce_authorship import check_username_free, item_not_found
from huddle.core.errors import NotFoundError, raise_for
from huddle.models.user import User

logger = logging.getLogger(__name__)

DELETED_USER = "DELETED_USER"


class Authing:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, username: str) -> User:
        existing = await self._find_by_username(username)
        raise_for(check_username_free(username, existing is not None))
        user = User(username=username)
        self.db.add(user)
        await self.db.flush()
        logger.info(f"User '{username}' created", extra={"user_id": user.id})
        return user

    async def update_username(self, user_id: UUID, username: str) -> User:
        user = await self.get_by_id(user_id)
        existing = await self._find_by_username(username)
        raise_for(check_username_free(username, existing is not None))
        user.username = username
        await self.db.flush()
        logger.info(f"User renamed to '{username}'", extra={"user_id": user_id})
        return user

    async def delete(self, user_id: UUID) -> None:
        user = await self.get_by_id(user_id)
        await self.db.delete(user)
        await self.db.flush()
        logger.info("User deleted", extra={"user_id": user_id})

    async def get_users(self) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.username),
        )
        return list(result.scalars().all())

    async def get_by_id(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise_for(item_not_found("user", user_id))
        return user

    async def get_by_username(self, username: str) -> User:
        user = await self._find_by_username(username)
        if user is None:
            raise NotFoundError(
                f"User with username {username} does not exist!", "USER_NOT_FOUND",
            )
        return user

    async def _find_by_username(self, username: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.username == username),
        )
        return result.scalar_one_or_none()

    async def usernames(self, user_ids: list[UUID]) -> list[str]:
        """Usernames in the order of user_ids; deleted users read DELETED_USER."""
        if not user_ids:
            return []
        result = await self.db.execute(
            select(User.id, User.username).where(User.id.in_(user_ids)),
        )
        by_id = dict(result.all())
        return [by_id.get(user_id, DELETED_USER) for user_id in user_ids]
