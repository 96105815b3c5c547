"""Friend Routes — friend lists and friend requests, addressed by username.

Invariants:
    - The acting user is always one end of the request or friendship
    - Usernames in paths resolve first: an unknown name → 404 USER_NOT_FOUND
    - Ids leave this module as usernames (DELETED_USER for removed accounts)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from huddle.api.dependencies import get_acting_user
from huddle.infrastructure.database import get_db
from huddle.models.friend import FriendRequest
from huddle.models.user import User
from huddle.schemas.social import FriendRequestResponse
from huddle.services.authing import Authing
from huddle.services.friending import Friending

router = APIRouter(prefix="/api/v1", tags=["friends"])


async def _to_responses(
    db: AsyncSession, requests: list[FriendRequest],
) -> list[FriendRequestResponse]:
    froms = await Authing(db).usernames([r.from_id for r in requests])
    tos = await Authing(db).usernames([r.to_id for r in requests])
    return [
        FriendRequestResponse(
            id=r.id,
            from_user=from_user,
            to_user=to_user,
            status=r.status,
            created_at=r.created_at,
            answered_at=r.answered_at,
        )
        for r, from_user, to_user in zip(requests, froms, tos)
    ]


@router.get("/friends", response_model=list[str])
async def get_friends(
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    return await Authing(db).usernames(await Friending(db).get_friends(user.id))


@router.delete("/friends/{friend}")
async def remove_friend(
    friend: str,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    friend_user = await Authing(db).get_by_username(friend)
    await Friending(db).remove_friend(user.id, friend_user.id)
    await db.commit()
    return {"msg": "Unfriended!"}


@router.get("/friend/requests", response_model=list[FriendRequestResponse])
async def get_requests(
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    return await _to_responses(db, await Friending(db).get_requests(user.id))


@router.post("/friend/requests/{to}", status_code=status.HTTP_201_CREATED)
async def send_request(
    to: str,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    to_user = await Authing(db).get_by_username(to)
    request = await Friending(db).send_request(user.id, to_user.id)
    await db.commit()
    (response,) = await _to_responses(db, [request])
    return {"msg": "Sent request!", "request": response}


@router.delete("/friend/requests/{to}")
async def remove_request(
    to: str,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    to_user = await Authing(db).get_by_username(to)
    await Friending(db).remove_request(user.id, to_user.id)
    await db.commit()
    return {"msg": "Removed request!"}


@router.put("/friend/accept/{from_user}")
async def accept_request(
    from_user: str,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    sender = await Authing(db).get_by_username(from_user)
    await Friending(db).accept_request(sender.id, user.id)
    await db.commit()
    return {"msg": "Accepted request!"}


@router.put("/friend/reject/{from_user}")
async def reject_request(
    from_user: str,
    user: User = Depends(get_acting_user),
    db: AsyncSession = Depends(get_db),
):
    sender = await Authing(db).get_by_username(from_user)
    await Friending(db).reject_request(sender.id, user.id)
    await db.commit()
    return {"msg": "Rejected request!"}
