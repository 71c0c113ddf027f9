# send_test_email.py
"""
Manual SMTP check: sends a real confirmation email using the SMTP_* settings
from the environment.

    python send_test_email.py you@example.com
"""

import sys
import uuid

from app.services.email_service import EmailService


def main():
    if len(sys.argv) != 2:
        print("usage: python send_test_email.py <recipient>")
        sys.exit(2)

    print("Sending test confirmation email...")
    otp = EmailService().send_confirmation_email(sys.argv[1], uuid.uuid4())
    print(f"Sent. The code in the email should be {otp}.")


if __name__ == "__main__":
    main()
