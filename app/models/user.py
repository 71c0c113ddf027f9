# app/models/user.py
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime
from sqlmodel import SQLModel, Field


class ConfirmationState(str, enum.Enum):
    """Email confirmation status of an account."""

    UNCONFIRMED = "unconfirmed"
    CONFIRMED = "confirmed"


class User(SQLModel, table=True):
    """
    Account of the greetings app.

    Authentication anchor (exactly one per row):
      - local account     : password_hash set, google_id NULL
      - federated account : google_id set, password_hash NULL

    Role:
      - "user" | "admin"

    Email confirmation:
      - email_confirmation_otp and email_confirmation_otp_expires are both
        NULL or both set, and always NULL once email_confirmed is True.
      - Only `issue_confirmation_otp` and `confirm_email` write these columns.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    email: str = Field(
        unique=True,
        index=True,
        max_length=255,
    )

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)

    password_hash: str | None = Field(default=None, max_length=255)

    google_id: str | None = Field(
        default=None,
        unique=True,
        index=True,
        max_length=255,
        description="Google account 'sub' for federated sign-in",
    )

    # Application role
    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    email_confirmed: bool = Field(default=False)

    email_confirmation_otp: str | None = Field(default=None, max_length=16)

    email_confirmation_otp_expires: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True),
    )

    refresh_token: str | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp (UTC)",
    )

    # ----- Email confirmation state -----

    @property
    def confirmation_state(self) -> ConfirmationState:
        if self.email_confirmed:
            return ConfirmationState.CONFIRMED
        return ConfirmationState.UNCONFIRMED

    def issue_confirmation_otp(self, otp: str, expires_at: datetime) -> None:
        """
        Store a pending confirmation code, replacing any previous one.

        Raises:
            ValueError: if the email is already confirmed.
        """
        if self.confirmation_state is ConfirmationState.CONFIRMED:
            raise ValueError("email already confirmed")
        self.email_confirmation_otp = otp
        self.email_confirmation_otp_expires = expires_at

    def confirm_email(self) -> None:
        """Move to CONFIRMED and drop the pending code."""
        self.email_confirmed = True
        self.email_confirmation_otp = None
        self.email_confirmation_otp_expires = None
