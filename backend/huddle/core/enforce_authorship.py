"""Authorship Enforcement — pure checks shared by the post and comment concepts.

Invariants:
    - Only the author of a post or comment may edit or delete it
    - Return a Rejection on violation, None on success
"""

from uuid import UUID

from huddle.core.errors import Rejection, RejectionKind


def item_not_found(kind: str, item_id: UUID) -> Rejection:
    return Rejection(
        RejectionKind.NOT_FOUND,
        f"{kind.upper()}_NOT_FOUND",
        f"{kind.capitalize()} {item_id} does not exist!",
    )


def check_is_author(
    kind: str, item_id: UUID, author_id: UUID, user_id: UUID,
) -> Rejection | None:
    if author_id != user_id:
        return Rejection(
            RejectionKind.NOT_ALLOWED,
            f"NOT_{kind.upper()}_AUTHOR",
            f"{user_id} is not the author of {kind} {item_id}!",
        )
    return None


def check_username_free(username: str, taken: bool) -> Rejection | None:
    if taken:
        return Rejection(
            RejectionKind.NOT_ALLOWED,
            "USERNAME_TAKEN",
            f"User with username {username} already exists!",
        )
    return None
