"""Social Schemas — users, friend requests, posts, comments and communities.

Invariants:
    - Free text is stripped and must not be empty
    - Community responses expose member and post sets as id lists
    - Friend requests are shown by username, never by raw user id
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from huddle.core.domain_types import (
    FriendRequestStatus,
    MAX_CONTENT_LENGTH, MAX_NAME_LENGTH, MAX_USERNAME_LENGTH,
)


def _strip_non_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


# --- Users --------------------------------------------------------------------

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=MAX_USERNAME_LENGTH)

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return _strip_non_empty(v)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    created_at: datetime


# --- Friends ------------------------------------------------------------------

class FriendRequestResponse(BaseModel):
    """A request with both ends resolved to usernames."""
    id: UUID
    from_user: str
    to_user: str
    status: FriendRequestStatus
    created_at: datetime
    answered_at: datetime | None = None


# --- Posts --------------------------------------------------------------------

class PostCreate(BaseModel):
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    community_id: UUID

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return _strip_non_empty(v)


class PostUpdate(BaseModel):
    content: str | None = Field(None, min_length=1, max_length=MAX_CONTENT_LENGTH)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str | None) -> str | None:
        return None if v is None else _strip_non_empty(v)


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime


# --- Comments -----------------------------------------------------------------

class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)
    target: UUID

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        return _strip_non_empty(v)


class CommentUpdate(BaseModel):
    content: str | None = Field(None, min_length=1, max_length=MAX_CONTENT_LENGTH)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str | None) -> str | None:
        return None if v is None else _strip_non_empty(v)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    target_id: UUID
    content: str
    created_at: datetime
    updated_at: datetime


# --- Communities --------------------------------------------------------------

class CommunityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    description: str = Field("", max_length=MAX_CONTENT_LENGTH)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_non_empty(v)


class CommunityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str
    members: list[UUID]
    posts: list[UUID]
    created_at: datetime
