"""Community Membership — owns communities, their member sets and linked-post sets.

Invariants:
    - A new community has exactly one member (its creator) and no posts
    - join/leave/link are read -> check (core/enforce_membership.py) -> write
    - The member/post association tables enforce uniqueness; a racing duplicate
      join that passes the pre-check fails on the key and surfaces as NotAllowed
    - Methods flush but never commit: the caller owns the unit of work

Design Decisions:
    - Mutations go through the relationship collections (append/remove with
      delete-orphan), so the loaded Community stays in sync with the rows
    - remove_linked_post of an absent post is a silent no-op (cleanup semantics)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.enforce_membership import (
    check_can_join,
    check_can_leave,
    check_can_link_post,
    check_is_member,
    community_not_found,
)
from huddle.core.errors import NotAllowedError, raise_for
from huddle.models.community import Community, CommunityMember, CommunityPost

logger = logging.getLogger(__name__)


class CommunityMembership:
    """Community concept: membership and post linkage."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, name: str, description: str, creator: UUID) -> Community:
        community = Community(
            name=name,
            description=description,
            memberships=[CommunityMember(user_id=creator)],
            post_links=[],
        )
        self.db.add(community)
        await self.db.flush()
        logger.info(
            f"Community '{name}' created",
            extra={"community_id": community.id, "user_id": creator},
        )
        return community

    # ─── Queries ────────────────────────────────────────────────

    async def get(self, community_id: UUID) -> Community:
        community = await self.db.get(
            Community, community_id, populate_existing=True,
        )
        if community is None:
            raise_for(community_not_found(community_id))
        return community

    async def get_all(self) -> list[Community]:
        result = await self.db.execute(
            select(Community).order_by(Community.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_by_name(self, name: str) -> list[Community]:
        result = await self.db.execute(
            select(Community)
            .where(Community.name == name)
            .order_by(Community.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_by_member(self, user_id: UUID) -> list[Community]:
        result = await self.db.execute(
            select(Community)
            .join(CommunityMember)
            .where(CommunityMember.user_id == user_id)
            .order_by(Community.created_at.desc()),
        )
        return list(result.scalars().all())

    async def get_by_linked_post(self, post_id: UUID) -> Community | None:
        result = await self.db.execute(
            select(Community)
            .join(CommunityPost)
            .where(CommunityPost.post_id == post_id),
        )
        return result.scalar_one_or_none()

    async def get_post_links(self) -> list[CommunityPost]:
        """Every (community, post) link, for reconciliation."""
        result = await self.db.execute(select(CommunityPost))
        return list(result.scalars().all())

    async def assert_member(self, community_id: UUID, user_id: UUID) -> None:
        community = await self.get(community_id)
        raise_for(check_is_member(community_id, community.members, user_id))

    # ─── Mutations ──────────────────────────────────────────────

    async def join(self, community_id: UUID, user_id: UUID) -> Community:
        community = await self.get(community_id)
        raise_for(check_can_join(community_id, community.members, user_id))
        community.memberships.append(CommunityMember(user_id=user_id))
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise NotAllowedError(
                f"User {user_id} is already a member of community {community_id}!",
                "ALREADY_A_MEMBER",
            ) from e
        logger.info(
            "User joined community",
            extra={"community_id": community_id, "user_id": user_id},
        )
        return community

    async def leave(self, community_id: UUID, user_id: UUID) -> Community:
        community = await self.get(community_id)
        raise_for(check_can_leave(community_id, community.members, user_id))
        membership = next(
            m for m in community.memberships if m.user_id == user_id
        )
        community.memberships.remove(membership)
        await self.db.flush()
        logger.info(
            "User left community",
            extra={"community_id": community_id, "user_id": user_id},
        )
        return community

    async def add_linked_post(self, community_id: UUID, post_id: UUID) -> Community:
        community = await self.get(community_id)
        linked = await self.get_by_linked_post(post_id)
        raise_for(check_can_link_post(post_id, linked.id if linked else None))
        community.post_links.append(CommunityPost(post_id=post_id))
        await self.db.flush()
        return community

    async def remove_linked_post(self, community_id: UUID, post_id: UUID) -> Community:
        community = await self.get(community_id)
        link = next(
            (p for p in community.post_links if p.post_id == post_id), None,
        )
        if link is not None:
            community.post_links.remove(link)
            await self.db.flush()
        return community
