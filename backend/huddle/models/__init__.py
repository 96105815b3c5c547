"""ORM Models — SQLAlchemy declarative models, one table set per concept.

Invariants:
    - All models inherit from Base (db/base.py)
    - No foreign key crosses a concept boundary: cross-concept references are
      plain UUID columns resolved by a fresh read at use time

Design Decisions:
    - One file per concept for locality
    - All models imported here so Base.metadata is complete before create_all / alembic
"""

from huddle.models.user import User  # noqa: F401
from huddle.models.post import Post  # noqa: F401
from huddle.models.comment import Comment  # noqa: F401
from huddle.models.community import Community, CommunityMember, CommunityPost  # noqa: F401
from huddle.models.goal import Goal  # noqa: F401
from huddle.models.friend import Friendship, FriendRequest  # noqa: F401
