"""Community Membership Enforcement — pure precondition checks for join/leave/link.

Invariants:
    - All functions are PURE: operate on the member / linked-post id collections
      already read by the shell
    - Return a Rejection on violation, None on success
    - A user appears at most once in a member set
    - The member set never becomes empty once created (last member cannot leave)

Design Decisions:
    - leave() by a non-member is an error, remove_linked_post() of an absent post
      is not: membership changes are user intents, unlinking is cleanup
      (ADR: one policy per entity, documented in DESIGN.md)
"""

from collections.abc import Collection
from uuid import UUID

from huddle.core.errors import Rejection, RejectionKind


def community_not_found(community_id: UUID) -> Rejection:
    return Rejection(
        RejectionKind.NOT_FOUND,
        "COMMUNITY_NOT_FOUND",
        f"Community {community_id} does not exist!",
    )


def check_is_member(
    community_id: UUID, members: Collection[UUID], user_id: UUID,
) -> Rejection | None:
    if user_id not in members:
        return _not_allowed(
            "NOT_A_MEMBER",
            f"User {user_id} is not a member of community {community_id}!",
        )
    return None


def check_can_join(
    community_id: UUID, members: Collection[UUID], user_id: UUID,
) -> Rejection | None:
    if user_id in members:
        return _not_allowed(
            "ALREADY_A_MEMBER",
            f"User {user_id} is already a member of community {community_id}!",
        )
    return None


def check_can_leave(
    community_id: UUID, members: Collection[UUID], user_id: UUID,
) -> Rejection | None:
    rejection = check_is_member(community_id, members, user_id)
    if rejection:
        return rejection
    if len(members) == 1:
        return _not_allowed(
            "LAST_MEMBER",
            f"User {user_id} is the last member of community {community_id} and cannot leave!",
        )
    return None


def check_can_link_post(
    post_id: UUID, linked_community_id: UUID | None,
) -> Rejection | None:
    """A post belongs to at most one community."""
    if linked_community_id is not None:
        return _not_allowed(
            "POST_ALREADY_LINKED",
            f"Post {post_id} is already linked to community {linked_community_id}!",
        )
    return None


def _not_allowed(code: str, message: str) -> Rejection:
    return Rejection(RejectionKind.NOT_ALLOWED, code, message)
