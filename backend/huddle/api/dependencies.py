"""Request Dependencies — acting-user resolution shared by all routes.

Invariants:
    - The acting user comes from the configured header (default X-User-Id)
    - Missing/malformed header → 400 validation error; unknown user → 404

Design Decisions:
    - Header identity instead of cookie sessions: authentication is handled in
      front of this service
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.config import get_settings
from huddle.infrastructure.database import get_db
from huddle.models.user import User
from huddle.services.authing import Authing


async def get_acting_user(
    user_id: UUID = Header(alias=get_settings().acting_user_header),
    db: AsyncSession = Depends(get_db),
) -> User:
    return await Authing(db).get_by_id(user_id)
