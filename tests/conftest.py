"""Shared pytest fixtures for the API and service tests."""

from __future__ import annotations

import os
from datetime import datetime, timezone

# Settings are read at import time; point them at an in-memory database
# before anything from `app` is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app.core import security  # noqa: E402
from app.database import engine, get_session  # noqa: E402
from app.dependencies import get_email_service, get_google_verifier  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402
from app.repositories.user_repo import UserRepository  # noqa: E402
from app.schemas.user import GoogleUserCreate  # noqa: E402
from app.services.user_service import UserService  # noqa: E402


class FakeMailer:
    """Records outgoing mail and hands out predictable codes."""

    def __init__(self):
        self.confirmations: list[tuple[str, object, str]] = []
        self.password_resets: list[tuple[str, str]] = []
        self._counter = 100000

    def send_confirmation_email(self, email, user_id) -> str:
        self._counter += 1
        otp = str(self._counter)
        self.confirmations.append((email, user_id, otp))
        return otp

    def send_password_reset_email(self, email, reset_link) -> None:
        self.password_resets.append((email, reset_link))

    @property
    def last_otp(self) -> str:
        return self.confirmations[-1][2]


class FailingMailer(FakeMailer):
    def send_confirmation_email(self, email, user_id) -> str:
        raise RuntimeError("SMTP is not configured")


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything is stored in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@pytest.fixture()
def session():
    SQLModel.metadata.create_all(engine)
    with Session(engine) as db_session:
        yield db_session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture()
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture()
def user_service(mailer) -> UserService:
    return UserService(UserRepository(), mailer)


@pytest.fixture()
def google_profiles() -> dict[str, GoogleUserCreate]:
    """id_token -> profile returned by the fake Google verifier."""
    return {}


@pytest.fixture()
def client(session, mailer, google_profiles):
    def fake_google_verifier(id_token: str) -> GoogleUserCreate:
        from app.core.exceptions import InvalidCodeError

        if id_token not in google_profiles:
            raise InvalidCodeError("Invalid Google token")
        return google_profiles[id_token]

    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_email_service] = lambda: mailer
    app.dependency_overrides[get_google_verifier] = lambda: fake_google_verifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(
    session: Session,
    email: str,
    *,
    password: str = "Secret123",
    role: str = "user",
    confirmed: bool = True,
    first_name: str = "Test",
    last_name: str = "User",
    created_at: datetime | None = None,
) -> User:
    """Insert a local account directly, bypassing the confirmation email."""
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        password_hash=security.hash_password(password),
        role=role,
        email_confirmed=confirmed,
    )
    if created_at is not None:
        user.created_at = created_at
    return UserRepository().create(session, user)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {security.create_access_token(user)}"}
