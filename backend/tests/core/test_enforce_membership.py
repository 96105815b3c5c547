"""Community Membership Enforcement — tests for join/leave/link preconditions.

Tests cover:
    - join by a member rejected, by a non-member allowed
    - leave by a non-member rejected, by the last member rejected
    - assert-member semantics
    - a post links into at most one community
"""

from uuid import uuid4

from huddle.core.enforce_membership import (
    check_can_join,
    check_can_leave,
    check_can_link_post,
    check_is_member,
    community_not_found,
)
from huddle.core.errors import RejectionKind


def test_member_passes_membership_check():
    user = uuid4()
    assert check_is_member(uuid4(), [user], user) is None


def test_non_member_fails_membership_check():
    rejection = check_is_member(uuid4(), [uuid4()], uuid4())
    assert rejection.kind is RejectionKind.NOT_ALLOWED
    assert rejection.code == "NOT_A_MEMBER"


def test_non_member_can_join():
    assert check_can_join(uuid4(), [uuid4()], uuid4()) is None


def test_member_cannot_join_twice():
    user = uuid4()
    rejection = check_can_join(uuid4(), [user], user)
    assert rejection.code == "ALREADY_A_MEMBER"


def test_member_can_leave_when_others_remain():
    user = uuid4()
    assert check_can_leave(uuid4(), [uuid4(), user], user) is None


def test_non_member_cannot_leave():
    rejection = check_can_leave(uuid4(), [uuid4(), uuid4()], uuid4())
    assert rejection.code == "NOT_A_MEMBER"


def test_last_member_cannot_leave():
    user = uuid4()
    rejection = check_can_leave(uuid4(), [user], user)
    assert rejection.kind is RejectionKind.NOT_ALLOWED
    assert rejection.code == "LAST_MEMBER"


def test_unlinked_post_can_be_linked():
    assert check_can_link_post(uuid4(), None) is None


def test_linked_post_cannot_be_linked_again():
    rejection = check_can_link_post(uuid4(), uuid4())
    assert rejection.code == "POST_ALREADY_LINKED"


def test_community_not_found_kind():
    assert community_not_found(uuid4()).kind is RejectionKind.NOT_FOUND
