"""Friending — friendships between users and the requests that lead to them.

Invariants:
    - send is read -> check (core/enforce_friendship.py) -> write
    - A request is answered (accepted/rejected) or withdrawn only while pending;
      the answer is a conditional UPDATE guarded by status = 'pending'
    - Accepting a request creates exactly one friendship row for the pair
    - Methods flush but never commit: the caller owns the unit of work

Design Decisions:
    - Answered requests are kept as history, withdrawn ones are deleted
    - Friendships are removed through the session (not a bulk DELETE), so a
      pair that befriends again later does not collide with a stale identity
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import and_, delete, exists, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.domain_types import FriendRequestStatus
from huddle.core.enforce_friendship import (
    check_can_send_request,
    friend_not_found,
    request_not_found,
)
from huddle.core.errors import NotAllowedError, raise_for
from huddle.models.friend import FriendRequest, Friendship

logger = logging.getLogger(__name__)

_PENDING = FriendRequestStatus.PENDING.value


def _pending(from_id: UUID, to_id: UUID):
    return and_(
        FriendRequest.from_id == from_id,
        FriendRequest.to_id == to_id,
        FriendRequest.status == _PENDING,
    )


class Friending:
    """Friend concept: requests, answers and the resulting friendships."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Queries ────────────────────────────────────────────────

    async def get_friends(self, user_id: UUID) -> list[UUID]:
        result = await self.db.execute(
            select(Friendship)
            .where(or_(Friendship.user1_id == user_id, Friendship.user2_id == user_id))
            .order_by(Friendship.created_at),
        )
        return [f.other(user_id) for f in result.scalars().all()]

    async def get_requests(self, user_id: UUID) -> list[FriendRequest]:
        """Every request the user sent or received, answered ones included."""
        result = await self.db.execute(
            select(FriendRequest)
            .where(or_(FriendRequest.from_id == user_id, FriendRequest.to_id == user_id))
            .order_by(FriendRequest.created_at)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())

    # ─── Requests ───────────────────────────────────────────────

    async def send_request(self, from_id: UUID, to_id: UUID) -> FriendRequest:
        friendship = await self._find_friendship(from_id, to_id)
        pending = await self.db.scalar(
            select(exists().where(or_(_pending(from_id, to_id), _pending(to_id, from_id)))),
        )
        raise_for(check_can_send_request(
            from_id, to_id, friendship is not None, bool(pending),
        ))
        request = FriendRequest(from_id=from_id, to_id=to_id, status=_PENDING)
        self.db.add(request)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise NotAllowedError(
                f"Friend request between {from_id} and {to_id} already exists!",
                "FRIEND_REQUEST_EXISTS",
            ) from e
        logger.info(
            "Friend request sent",
            extra={"user_id": from_id, "friend_id": to_id, "status": _PENDING},
        )
        return request

    async def remove_request(self, from_id: UUID, to_id: UUID) -> None:
        """Withdraw a pending request (sender side)."""
        result = await self.db.execute(
            delete(FriendRequest)
            .where(_pending(from_id, to_id))
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            raise_for(request_not_found(from_id, to_id))
        logger.info(
            "Friend request withdrawn",
            extra={"user_id": from_id, "friend_id": to_id},
        )

    async def accept_request(self, from_id: UUID, to_id: UUID) -> FriendRequest:
        request = await self._answer(from_id, to_id, FriendRequestStatus.ACCEPTED)
        self.db.add(Friendship.between(from_id, to_id))
        await self.db.flush()
        return request

    async def reject_request(self, from_id: UUID, to_id: UUID) -> FriendRequest:
        return await self._answer(from_id, to_id, FriendRequestStatus.REJECTED)

    # ─── Friendships ────────────────────────────────────────────

    async def remove_friend(self, user_id: UUID, friend_id: UUID) -> None:
        friendship = await self._find_friendship(user_id, friend_id)
        if friendship is None:
            raise_for(friend_not_found(user_id, friend_id))
        await self.db.delete(friendship)
        await self.db.flush()
        logger.info("Unfriended", extra={"user_id": user_id, "friend_id": friend_id})

    # ─── Internal ───────────────────────────────────────────────

    async def _answer(
        self, from_id: UUID, to_id: UUID, status: FriendRequestStatus,
    ) -> FriendRequest:
        request_id = await self.db.scalar(
            select(FriendRequest.id).where(_pending(from_id, to_id)),
        )
        if request_id is None:
            raise_for(request_not_found(from_id, to_id))

        result = await self.db.execute(
            update(FriendRequest)
            .where(FriendRequest.id == request_id, FriendRequest.status == _PENDING)
            .values(status=status.value, answered_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            raise_for(request_not_found(from_id, to_id))
        logger.info(
            "Friend request answered",
            extra={"user_id": to_id, "friend_id": from_id, "status": status.value},
        )
        return await self.db.get(FriendRequest, request_id, populate_existing=True)

    async def _find_friendship(self, a: UUID, b: UUID) -> Friendship | None:
        first, second = sorted((a, b))
        return await self.db.get(
            Friendship, (first, second), populate_existing=True,
        )
