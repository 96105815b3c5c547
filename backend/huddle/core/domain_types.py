"""Domain Types — goal and friend-request enums, goal ownership and field limits.

Invariants:
    - GoalStatus has exactly two members; a goal row holds exactly one of them
    - A goal owner is a user XOR a community (OwnerKind)
    - A friend request leaves PENDING at most once

Design Decisions:
    - str Enums: serialize to JSON and to String columns without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


# ─── Enums ───────────────────────────────────────────────────────

class GoalStatus(str, Enum):
    """Goal lifecycle partitions — maps to the indexed `goals.status` column.

    OPEN -> ACHIEVED is the only transition; ACHIEVED is terminal.
    """
    OPEN = "open"
    ACHIEVED = "achieved"


class OwnerKind(str, Enum):
    """Who a goal belongs to."""
    USER = "user"
    COMMUNITY = "community"


class FriendRequestStatus(str, Enum):
    """A request is answered once; answered requests stay as history."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class GoalOwner:
    """Owner reference of a goal: (kind, id). Compared by value."""
    kind: OwnerKind
    id: UUID

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


MAX_USERNAME_LENGTH = 64
MAX_NAME_LENGTH = 200
MAX_CONTENT_LENGTH = 10_000
