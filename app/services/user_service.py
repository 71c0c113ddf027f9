# app/services/user_service.py
import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from app.core.exceptions import ConflictError, InvalidCodeError, NotFoundError
from app.core.security import hash_password
from app.models.user import ConfirmationState, User
from app.repositories.user_repo import UserRepository
from app.schemas.user import (
    GoogleUserCreate,
    UserCreate,
    UserPage,
    UserRead,
    UserUpdate,
)
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)

DEFAULT_OTP_TTL = timedelta(minutes=15)


class UserService:
    """
    Business logic for User accounts.

    Responsibilities:
      - account creation (local and Google)
      - email confirmation codes: issue, re-issue, verify
      - lookups used by authentication
      - admin listing / update / delete
      - refresh token storage and revocation

    All database access goes through `repo`; all outgoing mail through
    `mailer`. Both are passed in so tests can substitute them.
    """

    def __init__(
        self,
        repo: UserRepository,
        mailer: EmailService,
        otp_ttl: timedelta = DEFAULT_OTP_TTL,
    ):
        self.repo = repo
        self.mailer = mailer
        self.otp_ttl = otp_ttl

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # ----- Creation -----

    def create_user(self, session: Session, payload: UserCreate) -> User:
        """
        Register a local account and send its confirmation code.

        Runs as one transaction:
          1. INSERT the row (flush only; duplicate email -> ConflictError).
          2. Send the confirmation email, which returns the code.
          3. Store the code with expiry now + otp_ttl.
          4. COMMIT.

        If sending fails, the INSERT is rolled back and the error propagates.
        """
        user = User(
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            password_hash=hash_password(payload.password),
        )
        self.repo.add(session, user)

        try:
            otp = self.mailer.send_confirmation_email(user.email, user.id)
        except Exception:
            session.rollback()
            logger.exception("Confirmation email failed; registration rolled back")
            raise

        user.issue_confirmation_otp(otp, self._now() + self.otp_ttl)
        user = self.repo.commit(session, user)
        logger.info("Created user %s", user.id)
        return user

    def create_google_user(self, session: Session, payload: GoogleUserCreate) -> User:
        """Federated account: Google already verified the email."""
        user = User(
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            google_id=str(payload.google_id),
            email_confirmed=True,
        )
        user = self.repo.create(session, user)
        logger.info("Created Google user %s", user.id)
        return user

    # ----- Email confirmation -----

    def update_user_otp(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Send a new confirmation code, replacing the pending one.

        Raises:
            NotFoundError: unknown user.
            ConflictError: email already confirmed.
        """
        try:
            user = self.repo.get_by_id(session, user_id)
            if user is None:
                raise NotFoundError("User not found")
            if user.confirmation_state is ConfirmationState.CONFIRMED:
                raise ConflictError("Email already confirmed")

            otp = self.mailer.send_confirmation_email(user.email, user.id)
            user.issue_confirmation_otp(otp, self._now() + self.otp_ttl)
            return self.repo.update(session, user)
        except Exception:
            logger.exception("Error updating confirmation code for user %s", user_id)
            raise

    def verify_email_otp(self, session: Session, user_id: uuid.UUID, otp: str) -> User:
        """
        Confirm the email if `otp` is the pending code and has not expired.

        Raises:
            InvalidCodeError: wrong code, expired code, or unknown user.
                The row is left untouched.
        """
        user = self.repo.get_with_valid_otp(session, user_id, otp, self._now())
        if user is None:
            raise InvalidCodeError("Invalid or expired OTP")

        user.confirm_email()
        user = self.repo.update(session, user)
        logger.info("Email confirmed for user %s", user.id)
        return user

    # ----- Lookups -----

    def get_user_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        return self.repo.get_by_id(session, user_id)

    def get_user_by_email(self, session: Session, email: str) -> User | None:
        return self.repo.get_by_email(session, email)

    def get_user_by_google_id(self, session: Session, google_id: str) -> User | None:
        return self.repo.get_by_google_id(session, str(google_id))

    def find_user_for_auth(self, session: Session, identifier: str) -> User | None:
        """One lookup for both local (email) and federated (google_id) sign-in."""
        return self.repo.get_by_email_or_google_id(session, identifier)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Get a user by id.

        Raises:
            NotFoundError: if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_count(self, session: Session) -> int:
        return self.repo.count(session)

    def get_all_users(
        self,
        session: Session,
        limit: int = 10,
        offset: int = 0,
        search: str = "",
        role: str | None = None,
    ) -> UserPage:
        """
        Admin listing, newest first.

        `next_offset` is None once this page reaches the end of the
        result set, otherwise offset + limit.
        """
        rows, total = self.repo.search(
            session,
            limit=limit,
            offset=offset,
            search=(search or "").strip(),
            role=role,
        )
        next_offset = offset + limit if offset + len(rows) < total else None
        return UserPage(
            users=[UserRead.model_validate(row) for row in rows],
            total_count=total,
            next_offset=next_offset,
        )

    # ----- Updates -----

    def update_user(self, session: Session, user_id: uuid.UUID, payload: UserUpdate) -> User:
        """
        Partial update; only fields present in the payload change.
        Accepts UserUpdate or UserAdminUpdate (which adds `role`).
        """
        user = self.get_user(session, user_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        return self.repo.update(session, user)

    def set_password(self, session: Session, user_id: uuid.UUID, new_password: str) -> User:
        user = self.get_user(session, user_id)
        user.password_hash = hash_password(new_password)
        return self.repo.update(session, user)

    def delete_user(self, session: Session, user_id: uuid.UUID) -> None:
        """Hard delete; the user's posts go with it."""
        user = self.get_user(session, user_id)
        self.repo.delete(session, user)
        logger.info("Deleted user %s", user_id)

    # ----- Session tokens -----

    def store_refresh_token(self, session: Session, user_id: uuid.UUID, token: str) -> None:
        self.repo.set_refresh_token(session, user_id, token)

    def rotate_refresh_token(
        self,
        session: Session,
        user_id: uuid.UUID,
        presented: str,
        replacement: str,
    ) -> bool:
        """Replace the stored token only if it is still `presented`."""
        return self.repo.rotate_refresh_token(session, user_id, presented, replacement)

    def revoke_refresh_token(self, session: Session, user_id: uuid.UUID) -> None:
        """Clear the stored refresh token. Safe to call repeatedly."""
        self.repo.set_refresh_token(session, user_id, None)
