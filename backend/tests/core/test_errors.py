"""Error Hierarchy — tests for the two domain kinds and their transport mapping.

Tests cover:
    - NotFoundError → 404 / resource_not_found, NotAllowedError → 403 / not_allowed
    - DatabaseError is retryable (503) and distinct from domain errors
    - raise_for turns a Rejection into the matching exception
    - to_response envelope shape
"""

import pytest

from huddle.core.errors import (
    DatabaseError,
    ErrorCategory,
    HuddleError,
    NotAllowedError,
    NotFoundError,
    Rejection,
    RejectionKind,
    raise_for,
)


def test_not_found_maps_to_404():
    err = NotFoundError("Goal x does not exist!")
    assert err.http_status == 404
    assert err.category is ErrorCategory.RESOURCE_NOT_FOUND


def test_not_allowed_maps_to_403():
    err = NotAllowedError("no")
    assert err.http_status == 403
    assert err.category is ErrorCategory.NOT_ALLOWED


def test_database_error_is_retryable_and_not_a_domain_kind():
    err = DatabaseError("boom", "execute")
    assert err.http_status == 503
    assert err.context.retry_after_ms is not None
    assert not isinstance(err, (NotFoundError, NotAllowedError))


def test_raise_for_none_is_noop():
    raise_for(None)


def test_raise_for_not_found():
    with pytest.raises(NotFoundError) as info:
        raise_for(Rejection(RejectionKind.NOT_FOUND, "GOAL_NOT_FOUND", "gone"))
    assert info.value.code == "GOAL_NOT_FOUND"
    assert info.value.message == "gone"


def test_raise_for_not_allowed():
    with pytest.raises(NotAllowedError) as info:
        raise_for(Rejection(RejectionKind.NOT_ALLOWED, "NOT_A_MEMBER", "nope"))
    assert info.value.code == "NOT_A_MEMBER"


def test_response_envelope():
    body = NotAllowedError("User is not a member", "NOT_A_MEMBER").to_response()
    assert body["error"]["code"] == "NOT_A_MEMBER"
    assert body["error"]["message"] == "User is not a member"
    assert body["error"]["category"] == "not_allowed"
    assert body["error"]["severity"] == "error"
    assert "timestamp" in body["error"]


def test_all_errors_share_base():
    for err in (NotFoundError("a"), NotAllowedError("b"), DatabaseError("c", "d")):
        assert isinstance(err, HuddleError)
