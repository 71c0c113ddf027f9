# app/services/auth_service.py
import hmac
import logging
from typing import Callable

from sqlmodel import Session

from app.core import security
from app.core.exceptions import ConflictError, ForbiddenError, InvalidCodeError
from app.models.user import User
from app.schemas.auth import TokenPair
from app.schemas.user import GoogleUserCreate, UserCreate, UserRead
from app.services.email_service import EmailService
from app.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Sign-in flows on top of UserService.

    Responsibilities:
      - local login (email + password) and Google login
      - access / refresh token issue, refresh rotation, logout
      - password reset by emailed link
    """

    def __init__(
        self,
        users: UserService,
        mailer: EmailService,
        google_verifier: Callable[[str], GoogleUserCreate],
        frontend_url: str,
    ):
        self.users = users
        self.mailer = mailer
        self.google_verifier = google_verifier
        self.frontend_url = frontend_url.rstrip("/")

    def _issue_tokens(
        self,
        session: Session,
        user: User,
        previous_refresh_token: str | None = None,
    ) -> TokenPair:
        access_token = security.create_access_token(user)
        refresh_token = security.create_refresh_token(user)
        if previous_refresh_token is None:
            self.users.store_refresh_token(session, user.id, refresh_token)
        elif not self.users.rotate_refresh_token(
            session, user.id, previous_refresh_token, refresh_token
        ):
            raise InvalidCodeError("Invalid or expired token")
        session.refresh(user)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            user=UserRead.model_validate(user),
        )

    def register(self, session: Session, payload: UserCreate) -> User:
        return self.users.create_user(session, payload)

    def login(self, session: Session, identifier: str, password: str) -> TokenPair:
        """
        Local sign-in.

        Unknown user, Google-only account and wrong password all fail with
        the same InvalidCodeError.

        Raises:
            InvalidCodeError: bad credentials.
            ForbiddenError: email not confirmed yet.
        """
        user = self.users.find_user_for_auth(session, identifier.strip())
        if user is None or not security.verify_password(password, user.password_hash):
            raise InvalidCodeError("Invalid credentials")
        if not user.email_confirmed:
            raise ForbiddenError("Email not confirmed")
        return self._issue_tokens(session, user)

    def login_with_google(self, session: Session, id_token: str) -> TokenPair:
        """
        Google sign-in. The first login creates a confirmed federated account.

        Raises:
            InvalidCodeError: Google rejected the token.
            ConflictError: the email already belongs to a local account.
        """
        profile = self.google_verifier(id_token)

        user = self.users.get_user_by_google_id(session, profile.google_id)
        if user is None:
            if self.users.get_user_by_email(session, profile.email) is not None:
                raise ConflictError("An account with this email already exists")
            user = self.users.create_google_user(session, profile)
        return self._issue_tokens(session, user)

    def refresh(self, session: Session, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new pair. The presented token must be
        the one currently stored, so each refresh token works once. The swap
        is a single conditional UPDATE; of two concurrent refreshes with the
        same token only one succeeds.
        """
        user_id = security.decode_token(refresh_token, security.REFRESH)
        user = self.users.get_user_by_id(session, user_id)
        if user is None:
            raise InvalidCodeError("Invalid or expired token")
        return self._issue_tokens(session, user, previous_refresh_token=refresh_token)

    def logout(self, session: Session, user: User) -> None:
        self.users.revoke_refresh_token(session, user.id)

    def request_password_reset(self, session: Session, email: str) -> None:
        """
        Email a reset link to a local account. Unknown or Google-only
        addresses are ignored so the endpoint does not reveal which emails
        are registered.
        """
        user = self.users.get_user_by_email(session, email)
        if user is None or user.password_hash is None:
            logger.info("Password reset requested for an unknown or federated email")
            return

        token = security.create_password_reset_token(user)
        link = f"{self.frontend_url}/reset-password?token={token}"
        self.mailer.send_password_reset_email(user.email, link)
        logger.info("Password reset link sent for user %s", user.id)

    def reset_password(self, session: Session, token: str, new_password: str) -> None:
        """
        Set a new password and sign out every session of the account.

        The token is only good for the password it was issued against, so a
        reset link works once.
        """
        claims = security.decode_claims(token, security.PASSWORD_RESET)
        user_id = security.user_id_from_claims(claims)
        user = self.users.get_user_by_id(session, user_id)
        if user is None or user.password_hash is None:
            raise InvalidCodeError("Invalid or expired token")
        fingerprint = security.password_fingerprint(user.password_hash)
        if not hmac.compare_digest(str(claims.get("pwd", "")), fingerprint):
            raise InvalidCodeError("Invalid or expired token")
        self.users.set_password(session, user_id, new_password)
        self.users.revoke_refresh_token(session, user_id)
