"""Friendship Enforcement — pure checks for friend requests and unfriending.

Invariants:
    - All functions are PURE: they see only what the shell already read
    - Return a Rejection on violation, None on success
    - No one befriends themselves; a pair is friends at most once
    - At most one pending request between two users, in either direction

Design Decisions:
    - A pending request from the other side blocks a new one: the user is
      expected to accept it instead of creating a crossing request
"""

from uuid import UUID

from huddle.core.errors import Rejection, RejectionKind


def request_not_found(from_id: UUID, to_id: UUID) -> Rejection:
    return Rejection(
        RejectionKind.NOT_FOUND,
        "FRIEND_REQUEST_NOT_FOUND",
        f"Friend request from {from_id} to {to_id} does not exist!",
    )


def friend_not_found(user_id: UUID, friend_id: UUID) -> Rejection:
    return Rejection(
        RejectionKind.NOT_FOUND,
        "FRIEND_NOT_FOUND",
        f"Friendship between {user_id} and {friend_id} does not exist!",
    )


def check_can_send_request(
    from_id: UUID,
    to_id: UUID,
    already_friends: bool,
    pending_between: bool,
) -> Rejection | None:
    if from_id == to_id or already_friends:
        return Rejection(
            RejectionKind.NOT_ALLOWED,
            "ALREADY_FRIENDS",
            f"{from_id} and {to_id} are already friends!",
        )
    if pending_between:
        return Rejection(
            RejectionKind.NOT_ALLOWED,
            "FRIEND_REQUEST_EXISTS",
            f"Friend request between {from_id} and {to_id} already exists!",
        )
    return None
