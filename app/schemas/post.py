# app/schemas/post.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

PostStatus = Literal["processing", "approved", "rejected"]
MediaType = Literal["image", "video", "audio"]


class MediaItem(SQLModel):
    """A file previously uploaded through /upload."""

    model_config = ConfigDict(extra="forbid")

    type: MediaType
    url: str = Field(min_length=1, max_length=2048)

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty")
        return v


class PostCreate(SQLModel):
    """
    Payload for submitting a greeting.

    Status and score are decided by moderators, never by the author.
    """

    model_config = ConfigDict(extra="forbid")

    body: str = Field(max_length=5000)
    media: list[MediaItem] = Field(default_factory=list, max_length=20)

    @field_validator("body")
    @classmethod
    def body_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("body cannot be empty")
        return v


class PostRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    body: str
    status: PostStatus
    score: float | None
    media: list[MediaItem]
    created_at: datetime


class PostPage(SQLModel):
    """Offset-paginated post listing."""

    posts: list[PostRead]
    total_count: int
    next_offset: int | None


class PostModeration(SQLModel):
    """
    Admin-only moderation update. At least one field must be set.
    """

    model_config = ConfigDict(extra="forbid")

    status: PostStatus | None = None
    score: float | None = Field(default=None, ge=0, le=10)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: PostStatus | None) -> PostStatus:
        # score may be cleared with null; status always has a value
        if v is None:
            raise ValueError("status cannot be null")
        return v
