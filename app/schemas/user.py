# app/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Role = Literal["user", "admin"]


def _normalize_name(v: str | None) -> str | None:
    if v is None:
        return v
    return v.strip()


class UserCreate(SQLModel):
    """
    Payload for local (email + password) registration.

    Validation rules:
      - email must be a valid EmailStr
      - password must be at least 8 characters
      - first_name cannot be empty or whitespace
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: str = Field(max_length=100)
    last_name: str = Field(default="", max_length=100)

    @field_validator("first_name")
    @classmethod
    def first_name_not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("first_name cannot be empty")
        return v

    @field_validator("last_name")
    @classmethod
    def normalize_last_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class GoogleUserCreate(SQLModel):
    """Profile of a verified Google identity, used to create a federated account."""

    google_id: str = Field(min_length=1)
    email: EmailStr
    first_name: str = ""
    last_name: str = ""

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserRead(SQLModel):
    """
    Response schema returned to clients.

    Never carries password_hash, refresh_token or the confirmation code.
    """

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: Role
    email_confirmed: bool
    google_id: str | None = None
    created_at: datetime


class UserPage(SQLModel):
    """Offset-paginated user listing."""

    users: list[UserRead]
    total_count: int
    next_offset: int | None


class UserUpdate(SQLModel):
    """
    Partial profile update for authenticated users.
    Only names are editable here. Omit a field to leave it unchanged;
    an explicit null is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("first_name")
    @classmethod
    def first_name_not_empty(cls, v: str | None) -> str:
        v = _normalize_name(v)
        if not v:
            raise ValueError("first_name cannot be empty")
        return v

    @field_validator("last_name")
    @classmethod
    def normalize_last_name(cls, v: str | None) -> str:
        v = _normalize_name(v)
        if v is None:
            raise ValueError("last_name cannot be null")
        return v


class UserAdminUpdate(UserUpdate):
    """Admin-side partial update: names and role."""

    role: Role | None = None

    @field_validator("role")
    @classmethod
    def role_not_null(cls, v: Role | None) -> Role:
        if v is None:
            raise ValueError("role cannot be null")
        return v


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role
