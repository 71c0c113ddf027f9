# app/core/email_client.py
"""
SMTP transport for outgoing mail (confirmation codes, password resets).

Configuration comes from environment variables, read once at import time:

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=greetings@example.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=greetings@example.com
    SMTP_FROM_NAME=Hero Greetings
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true

Use either SSL (usually port 465) or STARTTLS (usually port 587), not both.
"""

import logging
import os
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "y"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


SMTP_HOST: str | None = os.getenv("SMTP_HOST")
SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME: str | None = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD: str | None = os.getenv("SMTP_PASSWORD")

# Falls back to the login name when no explicit sender is configured
SMTP_FROM_EMAIL: str = os.getenv("SMTP_FROM_EMAIL", SMTP_USERNAME or "")
SMTP_FROM_NAME: str = os.getenv("SMTP_FROM_NAME", "Hero Greetings")

SMTP_USE_TLS: bool = _env_flag("SMTP_USE_TLS", default=True)
SMTP_USE_SSL: bool = _env_flag("SMTP_USE_SSL", default=False)

SMTP_TIMEOUT_SECONDS = 30


def _open_connection() -> smtplib.SMTP:
    if SMTP_USE_SSL:
        return smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS)

    server = smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS)
    if SMTP_USE_TLS:
        server.starttls()
    return server


def build_message(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> EmailMessage:
    """Plain-text message with an optional HTML alternative part."""
    msg = EmailMessage()
    if SMTP_FROM_EMAIL:
        msg["From"] = f"{SMTP_FROM_NAME} <{SMTP_FROM_EMAIL}>"
    elif SMTP_USERNAME:
        msg["From"] = SMTP_USERNAME
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text_body)
    if html_body:
        msg.add_alternative(html_body, subtype="html")
    return msg


def send_email(
    to_email: str,
    subject: str,
    text_body: str,
    html_body: str | None = None,
) -> None:
    """
    Send one message to one recipient.

    Raises
    ------
    RuntimeError:
        If SMTP_HOST, SMTP_USERNAME or SMTP_PASSWORD is missing.
    smtplib.SMTPException:
        If the connection, login or send fails.
    """
    if not (SMTP_HOST and SMTP_USERNAME and SMTP_PASSWORD):
        raise RuntimeError(
            "SMTP is not configured. "
            "Set SMTP_HOST, SMTP_USERNAME and SMTP_PASSWORD in .env."
        )

    msg = build_message(to_email, subject, text_body, html_body)

    with _open_connection() as server:
        server.login(SMTP_USERNAME, SMTP_PASSWORD)
        server.send_message(msg)

    logger.info("Sent email %r to %s", subject, to_email)
