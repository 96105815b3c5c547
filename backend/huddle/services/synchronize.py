"""Synchronizations — request-level workflows spanning two or more concepts.

Invariants:
    - Each workflow is one unit of work: every concept write in it commits
      together or is rolled back together (the rollback is the compensation)
    - Preconditions are read-only checks that run before the first write
    - Errors propagate unchanged after rollback; nothing is swallowed or retried
    - Concepts are reached only through core/repository_protocols.py

Design Decisions:
    - One transaction instead of saga compensation: both stores share one
      database, so "undo step 1" is a rollback (ADR: no orphan post, no dangling link)
    - reconcile() repairs drift written by older code paths or by direct DB edits;
      cross-concept references have no foreign keys to enforce them
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from huddle.core.domain_types import GoalOwner, OwnerKind
from huddle.core.enforce_goals import goal_not_found
from huddle.core.errors import HuddleError, raise_for
from huddle.core.repository_protocols import (
    CommentStore, GoalStore, MembershipStore, PostStore,
)
from huddle.models.comment import Comment
from huddle.models.goal import Goal
from huddle.models.post import Post
from huddle.services.commenting import Commenting
from huddle.services.communitying import CommunityMembership
from huddle.services.goaling import GoalLifecycle
from huddle.services.posting import Posting

logger = logging.getLogger(__name__)


class Synchronizations:
    """Cross-concept workflows. Concepts injectable for tests."""

    def __init__(
        self,
        db: AsyncSession,
        communities: MembershipStore | None = None,
        posts: PostStore | None = None,
        comments: CommentStore | None = None,
        goals: GoalStore | None = None,
    ):
        self.db = db
        self.communities = communities or CommunityMembership(db)
        self.posts = posts or Posting(db)
        self.comments = comments or Commenting(db)
        self.goals = goals or GoalLifecycle(db)

    @asynccontextmanager
    async def _unit_of_work(
        self, workflow: str, user_id: UUID | None = None,
    ) -> AsyncGenerator[None, None]:
        try:
            yield
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            code = e.code if isinstance(e, HuddleError) else type(e).__name__
            logger.warning(
                f"Workflow {workflow} rolled back: {e}",
                extra={"workflow": workflow, "user_id": user_id, "error_code": code},
            )
            raise

    # ─── Posts ──────────────────────────────────────────────────

    async def create_post(
        self, user_id: UUID, content: str, community_id: UUID,
    ) -> Post:
        """Member-only post creation, linked into the community atomically."""
        async with self._unit_of_work("create_post", user_id):
            await self.communities.assert_member(community_id, user_id)
            post = await self.posts.create(user_id, content)
            await self.communities.add_linked_post(community_id, post.id)
        logger.info(
            "Post linked into community",
            extra={"post_id": post.id, "community_id": community_id},
        )
        return post

    async def delete_post(self, user_id: UUID, post_id: UUID) -> UUID | None:
        """Delete a post and unlink it from its community. Returns that community's id."""
        async with self._unit_of_work("delete_post", user_id):
            await self.posts.assert_author(post_id, user_id)
            community = await self.communities.get_by_linked_post(post_id)
            await self.posts.delete(post_id)
            if community is not None:
                await self.communities.remove_linked_post(community.id, post_id)
        return community.id if community is not None else None

    async def create_comment(
        self, user_id: UUID, content: str, target_id: UUID,
    ) -> Comment:
        async with self._unit_of_work("create_comment", user_id):
            await self.posts.assert_exists(target_id)
            comment = await self.comments.create(user_id, content, target_id)
        return comment

    # ─── Goals ──────────────────────────────────────────────────

    async def create_community_goal(
        self,
        user_id: UUID,
        community_id: UUID,
        name: str,
        unit: str,
        amount: float,
        target_completion_date: datetime,
    ) -> Goal:
        async with self._unit_of_work("create_community_goal", user_id):
            await self.communities.assert_member(community_id, user_id)
            goal = await self.goals.create(
                GoalOwner(OwnerKind.COMMUNITY, community_id),
                name, unit, amount, target_completion_date,
            )
        return goal

    async def assert_can_manage_goal(
        self, user_id: UUID, goal_id: UUID, kind: OwnerKind,
    ) -> None:
        """User goals: only the owner. Community goals: any current member."""
        goal = await self.goals.get(goal_id)
        if goal.owner.kind is not kind:
            raise_for(goal_not_found(goal_id))
        if kind is OwnerKind.USER:
            await self.goals.assert_owner(goal_id, GoalOwner(OwnerKind.USER, user_id))
        else:
            await self.communities.assert_member(goal.owner_id, user_id)

    # ─── Repair ─────────────────────────────────────────────────

    async def reconcile(self) -> dict:
        """Repair cross-concept drift.

        Removes community links to posts that no longer exist, reports posts
        linked to no community, and achieves open goals already at target.
        """
        async with self._unit_of_work("reconcile"):
            links = await self.communities.get_post_links()
            existing = await self.posts.existing_ids(link.post_id for link in links)
            dangling = [link for link in links if link.post_id not in existing]
            for link in dangling:
                await self.communities.remove_linked_post(link.community_id, link.post_id)

            linked_ids = {link.post_id for link in links}
            unlinked = sorted(str(pid) for pid in await self.posts.get_ids() - linked_ids)
            achieved = await self.goals.transition_reached()

        report = {
            "dangling_links_removed": [str(link.post_id) for link in dangling],
            "unlinked_posts": unlinked,
            "goals_achieved": [str(goal_id) for goal_id in achieved],
        }
        if dangling or unlinked or achieved:
            logger.warning(f"Reconciliation repaired drift: {report}", extra={"workflow": "reconcile"})
        else:
            logger.info("Reconciliation found no drift", extra={"workflow": "reconcile"})
        return report
