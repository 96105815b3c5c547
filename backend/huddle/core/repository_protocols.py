"""Boundary Protocols — what the synchronizations need from each concept.

Invariants:
    - Synchronizations depend on these Protocols, never on a concrete concept class
    - Concept services in services/ satisfy them structurally

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy; tests
      substitute a failing concept without subclassing
    - Return types are left loose (object) where the synchronization only
      passes the value through to the response
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from huddle.core.domain_types import GoalOwner


class MembershipStore(Protocol):
    """Contract for community membership and post linkage."""
    async def get(self, community_id: UUID) -> Any: ...
    async def assert_member(self, community_id: UUID, user_id: UUID) -> None: ...
    async def get_by_linked_post(self, post_id: UUID) -> Any | None: ...
    async def get_post_links(self) -> list[Any]: ...
    async def add_linked_post(self, community_id: UUID, post_id: UUID) -> Any: ...
    async def remove_linked_post(self, community_id: UUID, post_id: UUID) -> Any: ...


class PostStore(Protocol):
    """Contract for post persistence."""
    async def create(self, author_id: UUID, content: str) -> Any: ...
    async def delete(self, post_id: UUID) -> None: ...
    async def assert_exists(self, post_id: UUID) -> None: ...
    async def assert_author(self, post_id: UUID, user_id: UUID) -> None: ...
    async def existing_ids(self, post_ids: Iterable[UUID]) -> set[UUID]: ...
    async def get_ids(self) -> set[UUID]: ...


class CommentStore(Protocol):
    """Contract for comment persistence."""
    async def create(self, author_id: UUID, content: str, target_id: UUID) -> Any: ...


class GoalStore(Protocol):
    """Contract for the goal lifecycle."""
    async def create(
        self, owner: GoalOwner, name: str, unit: str, amount: float,
        target_completion_date: datetime,
    ) -> Any: ...
    async def get(self, goal_id: UUID) -> Any: ...
    async def assert_owner(self, goal_id: UUID, owner: GoalOwner) -> None: ...
    async def transition_reached(self) -> list[UUID]: ...
