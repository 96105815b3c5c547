"""Synchronizations — cross-concept workflow tests.

Tests cover:
    - create_post: member-only, post linked into the community on success
    - Compensation: a failure after the post write leaves neither post nor link
    - delete_post unlinks the post from its community
    - create_comment requires an existing target post
    - Community goals: member-only creation and management
    - reconcile: dangling links removed, unlinked posts reported, stale goals achieved
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy import update

from huddle.core.domain_types import GoalOwner, GoalStatus, OwnerKind
from huddle.core.errors import DatabaseError, NotAllowedError, NotFoundError
from huddle.models.goal import Goal
from huddle.services.communitying import CommunityMembership
from huddle.services.goaling import GoalLifecycle
from huddle.services.posting import Posting
from huddle.services.synchronize import Synchronizations

DEADLINE = datetime(2027, 1, 1, tzinfo=timezone.utc)


class FailingLinkStore(CommunityMembership):
    """Membership store whose link write fails after the post is flushed."""

    async def add_linked_post(self, community_id, post_id):
        raise DatabaseError("connection lost while linking post", "add_linked_post")


async def _community(db, creator_id, name="Runners"):
    community = await CommunityMembership(db).create(name, "", creator_id)
    await db.commit()
    return community.id


# ─── Posts ───────────────────────────────────────────────────────

async def test_member_post_is_linked_into_community(test_db, alice):
    community_id = await _community(test_db, alice.id)

    post = await Synchronizations(test_db).create_post(alice.id, "first run", community_id)

    community = await CommunityMembership(test_db).get(community_id)
    assert community.posts == [post.id]
    assert post.author_id == alice.id


async def test_non_member_cannot_post(test_db, alice, bob):
    alice_id, bob_id = alice.id, bob.id
    community_id = await _community(test_db, alice_id)

    with pytest.raises(NotAllowedError) as info:
        await Synchronizations(test_db).create_post(bob_id, "hi", community_id)
    assert info.value.code == "NOT_A_MEMBER"
    assert await Posting(test_db).get_ids() == set()


async def test_post_into_missing_community_raises_not_found(test_db, alice):
    alice_id = alice.id
    with pytest.raises(NotFoundError):
        await Synchronizations(test_db).create_post(alice_id, "hi", uuid4())
    assert await Posting(test_db).get_ids() == set()


async def test_failed_link_rolls_back_post(test_db, alice):
    alice_id = alice.id
    community_id = await _community(test_db, alice_id)
    sync = Synchronizations(test_db, communities=FailingLinkStore(test_db))

    with pytest.raises(DatabaseError):
        await sync.create_post(alice_id, "lost", community_id)

    assert await Posting(test_db).get_ids() == set()
    assert (await CommunityMembership(test_db).get(community_id)).posts == []


async def test_delete_post_unlinks_it(test_db, alice):
    community_id = await _community(test_db, alice.id)
    sync = Synchronizations(test_db)
    post = await sync.create_post(alice.id, "bye", community_id)

    unlinked_from = await sync.delete_post(alice.id, post.id)

    assert unlinked_from == community_id
    assert (await CommunityMembership(test_db).get(community_id)).posts == []
    assert await Posting(test_db).get_ids() == set()


async def test_only_author_can_delete_post(test_db, alice, bob):
    alice_id, bob_id = alice.id, bob.id
    community_id = await _community(test_db, alice_id)
    sync = Synchronizations(test_db)
    post = await sync.create_post(alice_id, "mine", community_id)
    post_id = post.id

    with pytest.raises(NotAllowedError):
        await sync.delete_post(bob_id, post_id)
    assert (await CommunityMembership(test_db).get(community_id)).posts == [post_id]


async def test_comment_requires_existing_post(test_db, alice):
    alice_id = alice.id
    with pytest.raises(NotFoundError) as info:
        await Synchronizations(test_db).create_comment(alice_id, "nice", uuid4())
    assert info.value.code == "POST_NOT_FOUND"


async def test_comment_on_post(test_db, alice):
    community_id = await _community(test_db, alice.id)
    sync = Synchronizations(test_db)
    post = await sync.create_post(alice.id, "run", community_id)

    comment = await sync.create_comment(alice.id, "nice", post.id)
    assert comment.target_id == post.id


# ─── Community goals ─────────────────────────────────────────────

async def test_member_creates_community_goal(test_db, alice):
    community_id = await _community(test_db, alice.id)

    goal = await Synchronizations(test_db).create_community_goal(
        alice.id, community_id, "Marathon", "km", 42, DEADLINE,
    )
    assert goal.owner == GoalOwner(OwnerKind.COMMUNITY, community_id)


async def test_non_member_cannot_create_community_goal(test_db, alice, bob):
    alice_id, bob_id = alice.id, bob.id
    community_id = await _community(test_db, alice_id)

    with pytest.raises(NotAllowedError):
        await Synchronizations(test_db).create_community_goal(
            bob_id, community_id, "Marathon", "km", 42, DEADLINE,
        )
    assert await GoalLifecycle(test_db).get_open() == []


async def test_manage_goal_permissions(test_db, alice, bob):
    community_id = await _community(test_db, alice.id)
    sync = Synchronizations(test_db)
    goals = GoalLifecycle(test_db)
    user_goal = await goals.create(
        GoalOwner(OwnerKind.USER, alice.id), "Read", "pages", 100, DEADLINE,
    )
    community_goal = await goals.create(
        GoalOwner(OwnerKind.COMMUNITY, community_id), "Clean", "bags", 10, DEADLINE,
    )

    await sync.assert_can_manage_goal(alice.id, user_goal.id, OwnerKind.USER)
    await sync.assert_can_manage_goal(alice.id, community_goal.id, OwnerKind.COMMUNITY)
    with pytest.raises(NotAllowedError):
        await sync.assert_can_manage_goal(bob.id, user_goal.id, OwnerKind.USER)
    with pytest.raises(NotAllowedError):
        await sync.assert_can_manage_goal(bob.id, community_goal.id, OwnerKind.COMMUNITY)
    with pytest.raises(NotFoundError):
        await sync.assert_can_manage_goal(alice.id, user_goal.id, OwnerKind.COMMUNITY)


# ─── Reconcile ───────────────────────────────────────────────────

async def test_reconcile_repairs_drift(test_db, alice):
    alice_id = alice.id
    community_id = await _community(test_db, alice_id)
    dangling_post = uuid4()
    await CommunityMembership(test_db).add_linked_post(community_id, dangling_post)
    orphan = await Posting(test_db).create(alice_id, "no community")
    goal = await GoalLifecycle(test_db).create(
        GoalOwner(OwnerKind.USER, alice_id), "Run", "km", 10, DEADLINE,
    )
    await test_db.execute(update(Goal).where(Goal.id == goal.id).values(progress=10))
    orphan_id, goal_id = orphan.id, goal.id
    await test_db.commit()

    report = await Synchronizations(test_db).reconcile()

    assert report == {
        "dangling_links_removed": [str(dangling_post)],
        "unlinked_posts": [str(orphan_id)],
        "goals_achieved": [str(goal_id)],
    }
    assert (await CommunityMembership(test_db).get(community_id)).posts == []
    assert (await GoalLifecycle(test_db).get(goal_id)).status == GoalStatus.ACHIEVED.value


async def test_reconcile_without_drift_reports_nothing(test_db, alice):
    community_id = await _community(test_db, alice.id)
    await Synchronizations(test_db).create_post(alice.id, "linked", community_id)

    report = await Synchronizations(test_db).reconcile()
    assert report == {
        "dangling_links_removed": [],
        "unlinked_posts": [],
        "goals_achieved": [],
    }
