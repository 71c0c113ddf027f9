# app/schemas/auth.py
import uuid

from pydantic import EmailStr, ConfigDict
from sqlmodel import SQLModel, Field

from app.schemas.user import UserRead


class OTPVerify(SQLModel):
    model_config = ConfigDict(extra="forbid")

    user_id: uuid.UUID
    otp: str = Field(min_length=1, max_length=16)


class OTPResend(SQLModel):
    model_config = ConfigDict(extra="forbid")

    user_id: uuid.UUID


class LoginRequest(SQLModel):
    """
    `identifier` is the account email. Federated accounts sign in through
    /auth/google instead.
    """

    model_config = ConfigDict(extra="forbid")

    identifier: str = Field(min_length=1)
    password: str = Field(min_length=1)


class GoogleLoginRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    id_token: str = Field(min_length=1)


class RefreshRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    refresh_token: str = Field(min_length=1)


class ForgotPasswordRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr


class ResetPasswordRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    token: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=128)


class TokenPair(SQLModel):
    """Tokens returned after a successful sign-in or refresh."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserRead


class MessageResponse(SQLModel):
    message: str
