# app/services/email_service.py
import logging
import secrets
import uuid

from app.core.email_client import send_email

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Random numeric code, zero-padded to `length` digits."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class EmailService:
    """
    Outgoing account emails.

    The service only generates and delivers codes. Persisting a code and its
    expiry is the caller's job (UserService).
    """

    def __init__(self, otp_expire_minutes: int = 15):
        self.otp_expire_minutes = otp_expire_minutes

    def send_confirmation_email(self, email: str, user_id: uuid.UUID) -> str:
        """
        Email a fresh confirmation code to `email`.

        Returns:
            The generated code.

        Raises:
            RuntimeError / smtplib.SMTPException from the SMTP client.
        """
        otp = generate_otp()
        send_email(
            to_email=email,
            subject="Confirm your email",
            text_body=(
                f"Your confirmation code is {otp}.\n\n"
                f"It expires in {self.otp_expire_minutes} minutes."
            ),
            html_body=(
                f"<p>Your confirmation code is <b>{otp}</b>.</p>"
                f"<p>It expires in {self.otp_expire_minutes} minutes.</p>"
            ),
        )
        logger.info("Confirmation code sent for user %s", user_id)
        return otp

    def send_password_reset_email(self, email: str, reset_link: str) -> None:
        send_email(
            to_email=email,
            subject="Reset your password",
            text_body=(
                "Someone asked to reset the password for this account.\n"
                f"Open this link to choose a new one: {reset_link}\n\n"
                "If it wasn't you, ignore this email."
            ),
            html_body=(
                "<p>Someone asked to reset the password for this account.</p>"
                f'<p><a href="{reset_link}">Choose a new password</a></p>'
                "<p>If it wasn't you, ignore this email.</p>"
            ),
        )
