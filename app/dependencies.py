# app/dependencies.py
"""
Service providers for FastAPI `Depends`.

Routers never build services at import time; they ask for them here, and
tests swap collaborators through `app.dependency_overrides`, e.g.:

    app.dependency_overrides[get_email_service] = lambda: FakeMailer()
"""

from datetime import timedelta

from fastapi import Depends

from app.core.config import get_settings
from app.core.google_auth import verify_google_id_token
from app.repositories.post_repo import PostRepository
from app.repositories.user_repo import UserRepository
from app.services.auth_service import AuthService
from app.services.email_service import EmailService
from app.services.post_service import PostService
from app.services.upload_service import UploadService
from app.services.user_service import UserService


def get_email_service() -> EmailService:
    return EmailService(otp_expire_minutes=get_settings().OTP_EXPIRE_MINUTES)


def get_google_verifier():
    return verify_google_id_token


def get_user_service(mailer: EmailService = Depends(get_email_service)) -> UserService:
    return UserService(
        UserRepository(),
        mailer,
        otp_ttl=timedelta(minutes=get_settings().OTP_EXPIRE_MINUTES),
    )


def get_auth_service(
    users: UserService = Depends(get_user_service),
    mailer: EmailService = Depends(get_email_service),
    google_verifier=Depends(get_google_verifier),
) -> AuthService:
    return AuthService(
        users,
        mailer,
        google_verifier=google_verifier,
        frontend_url=get_settings().FRONTEND_URL,
    )


def get_post_service() -> PostService:
    return PostService(PostRepository())


def get_upload_service() -> UploadService:
    return UploadService()
