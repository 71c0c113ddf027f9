# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.dependencies import get_auth_service, get_user_service
from app.models.user import User
from app.schemas.auth import (
    ForgotPasswordRequest,
    GoogleLoginRequest,
    LoginRequest,
    MessageResponse,
    OTPResend,
    OTPVerify,
    RefreshRequest,
    ResetPasswordRequest,
    TokenPair,
)
from app.schemas.user import UserCreate, UserRead
from app.services.auth_service import AuthService
from app.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


# -------- Registration & email confirmation --------


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Create a local account and email a confirmation code.

    The code is valid for 15 minutes; the account cannot sign in until
    it is confirmed through /auth/confirm-email.
    """
    return auth.register(session, payload)


@router.post("/confirm-email", response_model=UserRead)
def confirm_email(
    payload: OTPVerify,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    """
    Confirm an email with the emailed code.

    Wrong and expired codes both return 401 "Invalid or expired OTP".
    """
    return users.verify_email_otp(session, payload.user_id, payload.otp)


@router.post("/resend-otp", response_model=MessageResponse)
def resend_otp(
    payload: OTPResend,
    session: Session = Depends(get_session),
    users: UserService = Depends(get_user_service),
):
    """
    Email a new confirmation code. The previous code stops working.
    """
    users.update_user_otp(session, payload.user_id)
    return MessageResponse(message="Confirmation code sent")


# -------- Sessions --------


@router.post("/login", response_model=TokenPair)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
):
    """Email + password sign-in for confirmed accounts."""
    return auth.login(session, payload.identifier, payload.password)


@router.post("/google", response_model=TokenPair)
def login_with_google(
    payload: GoogleLoginRequest,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Sign in with a Google ID token. First sign-in creates the account
    (already confirmed).
    """
    return auth.login_with_google(session, payload.id_token)


@router.post("/refresh", response_model=TokenPair)
def refresh(
    payload: RefreshRequest,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
):
    """Rotate the refresh token and get a new access token."""
    return auth.refresh(session, payload.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    auth: AuthService = Depends(get_auth_service),
):
    """Revoke the stored refresh token."""
    auth.logout(session, current_user)
    return None


# -------- Password reset --------


@router.post(
    "/forgot-password",
    response_model=MessageResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def forgot_password(
    payload: ForgotPasswordRequest,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Email a reset link if the address belongs to a local account.
    The response is the same either way.
    """
    auth.request_password_reset(session, payload.email)
    return MessageResponse(message="If the account exists, a reset link has been sent")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    payload: ResetPasswordRequest,
    session: Session = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
):
    """Set a new password using the token from the reset link."""
    auth.reset_password(session, payload.token, payload.new_password)
    return MessageResponse(message="Password updated")
