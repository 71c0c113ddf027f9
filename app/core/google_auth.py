# app/core/google_auth.py
import logging

import requests

from app.core.config import get_settings
from app.core.exceptions import InvalidCodeError
from app.schemas.user import GoogleUserCreate

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
GOOGLE_TIMEOUT_SECONDS = 10


def verify_google_id_token(id_token: str) -> GoogleUserCreate:
    """
    Validate a Google ID token (from Google Identity Services on the
    frontend) through Google's tokeninfo endpoint.

    Checks:
      - Google accepts the token (HTTP 200)
      - aud matches GOOGLE_CLIENT_ID
      - email_verified is true

    Returns:
        The Google profile, ready for `UserService.create_google_user`.

    Raises:
        InvalidCodeError: if any check fails or Google sign-in is not configured.
    """
    client_id = get_settings().GOOGLE_CLIENT_ID
    if not client_id:
        raise InvalidCodeError("Google sign-in is not configured")

    response = requests.get(
        GOOGLE_TOKENINFO_URL,
        params={"id_token": id_token},
        timeout=GOOGLE_TIMEOUT_SECONDS,
    )
    if response.status_code != 200:
        logger.info("Google rejected an ID token (HTTP %s)", response.status_code)
        raise InvalidCodeError("Invalid Google token")

    info = response.json()
    if info.get("aud") != client_id:
        raise InvalidCodeError("Invalid Google token")
    if str(info.get("email_verified", "")).lower() != "true":
        raise InvalidCodeError("Google account email is not verified")

    return GoogleUserCreate(
        google_id=info["sub"],
        email=info["email"],
        first_name=info.get("given_name", ""),
        last_name=info.get("family_name", ""),
    )
