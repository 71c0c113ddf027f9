# app/repositories/user_repo.py
import uuid
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, func, or_, select

from app.core.exceptions import ConflictError
from app.models.user import User

# SQLSTATE for unique_violation (Postgres)
UNIQUE_VIOLATION = "23505"


def _raise_for_integrity_error(exc: IntegrityError) -> None:
    """
    Unique violations (email, google_id) become ConflictError.
    Anything else (NOT NULL, foreign keys) is re-raised unchanged.
    """
    orig = exc.orig
    if getattr(orig, "pgcode", None) == UNIQUE_VIOLATION or "UNIQUE constraint failed" in str(orig):
        raise ConflictError("Email or Google account already registered") from exc
    raise exc


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
      - Unique-constraint violations surface as ConflictError
    """

    # ----- Lookups -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email.lower())
        return session.exec(stmt).first()

    def get_by_google_id(self, session: Session, google_id: str) -> User | None:
        stmt = select(User).where(User.google_id == str(google_id))
        return session.exec(stmt).first()

    def get_by_email_or_google_id(self, session: Session, identifier: str) -> User | None:
        """Match `identifier` against email OR google_id."""
        stmt = select(User).where(
            or_(User.email == identifier.lower(), User.google_id == identifier)
        )
        return session.exec(stmt).first()

    def get_with_valid_otp(
        self,
        session: Session,
        user_id: uuid.UUID,
        otp: str,
        now: datetime,
    ) -> User | None:
        """
        Return the user only if `otp` is its pending code and the code
        expires strictly after `now`.
        """
        stmt = select(User).where(
            User.id == user_id,
            User.email_confirmation_otp == otp,
            col(User.email_confirmation_otp_expires) > now,
        )
        return session.exec(stmt).first()

    def count(self, session: Session) -> int:
        return session.exec(select(func.count()).select_from(User)).one()

    def search(
        self,
        session: Session,
        *,
        limit: int,
        offset: int,
        search: str = "",
        role: str | None = None,
    ) -> tuple[list[User], int]:
        """
        Paginated, filtered user listing.

        Filters:
          - search: case-insensitive substring of first_name, last_name or email
          - role: exact match

        Returns:
            (rows for this page ordered by created_at DESC, total matching rows)
        """
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(
                    col(User.first_name).ilike(pattern),
                    col(User.last_name).ilike(pattern),
                    col(User.email).ilike(pattern),
                )
            )
        if role:
            conditions.append(User.role == role)

        count_stmt = select(func.count()).select_from(User).where(*conditions)
        total = session.exec(count_stmt).one()

        stmt = (
            select(User)
            .where(*conditions)
            .order_by(col(User.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return list(session.exec(stmt).all()), total

    # ----- Writes -----

    def add(self, session: Session, user: User) -> User:
        """
        Insert a new User without committing, but make sure the INSERT runs
        so constraint violations show up here.
        """
        session.add(user)
        try:
            session.flush()
        except IntegrityError as exc:
            session.rollback()
            _raise_for_integrity_error(exc)
        return user

    def commit(self, session: Session, user: User) -> User:
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            _raise_for_integrity_error(exc)
        session.refresh(user)
        return user

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        self.add(session, user)
        return self.commit(session, user)

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        return self.commit(session, user)

    def set_refresh_token(
        self,
        session: Session,
        user_id: uuid.UUID,
        token: str | None,
    ) -> None:
        """Single-row UPDATE of refresh_token; no-op for unknown ids."""
        stmt = update(User).where(User.id == user_id).values(refresh_token=token)
        session.exec(stmt)
        session.commit()

    def rotate_refresh_token(
        self,
        session: Session,
        user_id: uuid.UUID,
        presented: str,
        replacement: str,
    ) -> bool:
        """
        Swap `presented` for `replacement` in one conditional UPDATE.

        Returns False when the stored token is no longer `presented`
        (already rotated, revoked, or unknown user).
        """
        stmt = (
            update(User)
            .where(User.id == user_id, User.refresh_token == presented)
            .values(refresh_token=replacement)
        )
        result = session.exec(stmt)
        session.commit()
        return result.rowcount == 1

    def delete(self, session: Session, user: User) -> None:
        """Delete a User."""
        session.delete(user)
        session.commit()
