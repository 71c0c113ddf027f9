# app/models/post.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import SQLModel, Field


class Post(SQLModel, table=True):
    """
    A birthday greeting written by a user.

    Moderation:
      - status starts as "processing"
      - admins move it to "approved" | "rejected" and may attach a score
      - only approved posts are listed publicly

    media:
      JSON list of {"type": "image" | "video" | "audio", "url": "..."}
      pointing at files previously uploaded through /upload.
    """

    __tablename__ = "posts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        index=True,
    )

    body: str = Field(max_length=5000)

    status: str = Field(
        default="processing",
        index=True,
        description="processing | approved | rejected",
    )

    score: float | None = Field(default=None)

    media: list[dict] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
