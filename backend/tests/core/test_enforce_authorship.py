"""Authorship Enforcement — tests for author-only edits and username uniqueness."""

from uuid import uuid4

from huddle.core.enforce_authorship import (
    check_is_author,
    check_username_free,
    item_not_found,
)
from huddle.core.errors import RejectionKind


def test_author_passes():
    user = uuid4()
    assert check_is_author("post", uuid4(), user, user) is None


def test_non_author_rejected_with_kind_specific_code():
    rejection = check_is_author("comment", uuid4(), uuid4(), uuid4())
    assert rejection.kind is RejectionKind.NOT_ALLOWED
    assert rejection.code == "NOT_COMMENT_AUTHOR"


def test_item_not_found_code():
    rejection = item_not_found("post", uuid4())
    assert rejection.kind is RejectionKind.NOT_FOUND
    assert rejection.code == "POST_NOT_FOUND"


def test_username_taken():
    assert check_username_free("alice", taken=False) is None
    assert check_username_free("alice", taken=True).code == "USERNAME_TAKEN"
