# app/core/security.py
"""
Password hashing and the JWTs this backend issues.

Token types (claim "type"):
  - access          : short-lived, sent as Bearer on every request
  - refresh         : long-lived, stored on the user row, rotated on use
  - password_reset  : emailed as part of the reset link; carries a
                      fingerprint of the password hash it was issued for
"""

import hashlib
import hmac
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt, JWTError
from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.exceptions import InvalidCodeError
from app.models.user import User

settings = get_settings()

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ACCESS = "access"
REFRESH = "refresh"
PASSWORD_RESET = "password_reset"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _encode(user: User, token_type: str, expires_delta: timedelta, **extra: Any) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        "type": token_type,
        "iat": now,
        "exp": now + expires_delta,
        **extra,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def create_access_token(user: User) -> str:
    return _encode(
        user,
        ACCESS,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        role=user.role,
    )


def create_refresh_token(user: User) -> str:
    # jti keeps two refresh tokens issued in the same second distinct
    return _encode(
        user,
        REFRESH,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        jti=secrets.token_urlsafe(16),
    )


def password_fingerprint(password_hash: str) -> str:
    """
    Short keyed digest of the current password hash.

    Changes whenever the password changes, so a reset token carrying it
    stops working after the first successful reset.
    """
    digest = hmac.new(
        settings.JWT_SECRET.encode(), password_hash.encode(), hashlib.sha256
    ).hexdigest()
    return digest[:32]


def create_password_reset_token(user: User) -> str:
    return _encode(
        user,
        PASSWORD_RESET,
        timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
        pwd=password_fingerprint(user.password_hash or ""),
    )


def decode_claims(token: str, expected_type: str) -> dict[str, Any]:
    """
    Verify signature, expiry and token type and return the claims.

    Raises:
        InvalidCodeError: for any invalid, expired or mistyped token.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    except JWTError:
        raise InvalidCodeError("Invalid or expired token")

    if payload.get("type") != expected_type:
        raise InvalidCodeError("Invalid or expired token")
    return payload


def user_id_from_claims(payload: dict[str, Any]) -> uuid.UUID:
    try:
        return uuid.UUID(payload.get("sub", ""))
    except (TypeError, ValueError):
        raise InvalidCodeError("Invalid or expired token")


def decode_token(token: str, expected_type: str) -> uuid.UUID:
    """
    Verify the token like decode_claims.

    Returns:
        The user id from the "sub" claim.
    """
    return user_id_from_claims(decode_claims(token, expected_type))
