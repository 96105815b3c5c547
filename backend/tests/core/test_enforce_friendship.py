"""Friendship Enforcement — tests for friend request preconditions.

Tests cover:
    - self-requests and requests between friends rejected as ALREADY_FRIENDS
    - a pending request in either direction blocks a new one
    - not-found rejections carry their codes
"""

from uuid import uuid4

from huddle.core.enforce_friendship import (
    check_can_send_request,
    friend_not_found,
    request_not_found,
)
from huddle.core.errors import RejectionKind


def test_request_between_strangers_passes():
    assert check_can_send_request(uuid4(), uuid4(), False, False) is None


def test_request_to_self_rejected():
    user = uuid4()
    rejection = check_can_send_request(user, user, False, False)
    assert rejection.kind is RejectionKind.NOT_ALLOWED
    assert rejection.code == "ALREADY_FRIENDS"


def test_request_between_friends_rejected():
    assert check_can_send_request(uuid4(), uuid4(), True, False).code == "ALREADY_FRIENDS"


def test_pending_request_blocks_another():
    rejection = check_can_send_request(uuid4(), uuid4(), False, True)
    assert rejection.kind is RejectionKind.NOT_ALLOWED
    assert rejection.code == "FRIEND_REQUEST_EXISTS"


def test_not_found_codes():
    assert request_not_found(uuid4(), uuid4()).kind is RejectionKind.NOT_FOUND
    assert request_not_found(uuid4(), uuid4()).code == "FRIEND_REQUEST_NOT_FOUND"
    assert friend_not_found(uuid4(), uuid4()).code == "FRIEND_NOT_FOUND"
