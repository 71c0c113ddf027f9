"""End-to-end tests for /auth: registration, confirmation, sessions, password reset."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import pytest

from app.schemas.user import GoogleUserCreate
from conftest import make_user

API = "/api/v1"


def _register(client, email="new@example.com", password="Secret123"):
    return client.post(
        f"{API}/auth/register",
        json={"email": email, "password": password, "first_name": "New", "last_name": "User"},
    )


def _login(client, identifier, password="Secret123"):
    return client.post(f"{API}/auth/login", json={"identifier": identifier, "password": password})


def test_register_confirm_and_login(client, mailer):
    response = _register(client)
    assert response.status_code == 201, response.text
    user = response.json()
    assert user["email_confirmed"] is False
    assert "email_confirmation_otp" not in user
    assert "password_hash" not in user

    # not confirmed yet
    assert _login(client, "new@example.com").status_code == 403

    response = client.post(
        f"{API}/auth/confirm-email",
        json={"user_id": user["id"], "otp": mailer.last_otp},
    )
    assert response.status_code == 200, response.text
    assert response.json()["email_confirmed"] is True

    response = _login(client, "new@example.com")
    assert response.status_code == 200, response.text
    tokens = response.json()
    assert tokens["token_type"] == "bearer"
    assert tokens["user"]["email"] == "new@example.com"

    me = client.get(
        f"{API}/users/me",
        headers={"Authorization": f"Bearer {tokens['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]


def test_register_rejects_duplicate_email(client):
    assert _register(client).status_code == 201
    response = _register(client, email="NEW@example.com")
    assert response.status_code == 409


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "password": "Secret123", "first_name": "A"},
        {"email": "a@b.com", "password": "short", "first_name": "A"},
        {"email": "a@b.com", "password": "Secret123", "first_name": "   "},
        {"email": "a@b.com", "password": "Secret123"},
    ],
)
def test_register_validation(client, payload):
    response = client.post(f"{API}/auth/register", json=payload)
    assert response.status_code == 422


def test_confirm_with_wrong_code_is_401(client, mailer):
    user = _register(client).json()

    response = client.post(
        f"{API}/auth/confirm-email",
        json={"user_id": user["id"], "otp": "999999"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired OTP"


def test_resend_otp_invalidates_previous_code(client, mailer):
    user = _register(client).json()
    old_code = mailer.last_otp

    response = client.post(f"{API}/auth/resend-otp", json={"user_id": user["id"]})
    assert response.status_code == 200
    assert mailer.last_otp != old_code

    response = client.post(
        f"{API}/auth/confirm-email",
        json={"user_id": user["id"], "otp": old_code},
    )
    assert response.status_code == 401


def test_resend_otp_unknown_user_is_404(client):
    response = client.post(
        f"{API}/auth/resend-otp",
        json={"user_id": "00000000-0000-0000-0000-000000000000"},
    )
    assert response.status_code == 404


def test_login_wrong_password_and_unknown_user_look_the_same(client, session):
    make_user(session, "known@example.com")

    wrong = _login(client, "known@example.com", password="nope-nope")
    unknown = _login(client, "ghost@example.com")

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


def test_refresh_rotates_token(client, session):
    make_user(session, "a@example.com")
    tokens = _login(client, "a@example.com").json()

    response = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200, response.text
    rotated = response.json()
    assert rotated["refresh_token"] != tokens["refresh_token"]

    # the old one has been replaced
    reused = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert reused.status_code == 401


def test_access_token_is_not_a_refresh_token(client, session):
    make_user(session, "a@example.com")
    tokens = _login(client, "a@example.com").json()

    response = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["access_token"]})

    assert response.status_code == 401


def test_logout_revokes_refresh_token(client, session):
    user = make_user(session, "a@example.com")
    tokens = _login(client, "a@example.com").json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    assert client.post(f"{API}/auth/logout", headers=headers).status_code == 204
    session.refresh(user)
    assert user.refresh_token is None

    response = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 401


def test_logout_requires_auth(client):
    assert client.post(f"{API}/auth/logout").status_code == 401


def test_google_login_creates_confirmed_account_once(client, google_profiles, mailer):
    google_profiles["good-token"] = GoogleUserCreate(
        google_id="google-sub-1",
        email="g@example.com",
        first_name="Gina",
        last_name="Oogle",
    )

    first = client.post(f"{API}/auth/google", json={"id_token": "good-token"})
    assert first.status_code == 200, first.text
    user = first.json()["user"]
    assert user["email_confirmed"] is True
    assert user["google_id"] == "google-sub-1"
    assert mailer.confirmations == []

    second = client.post(f"{API}/auth/google", json={"id_token": "good-token"})
    assert second.status_code == 200
    assert second.json()["user"]["id"] == user["id"]


def test_google_login_rejects_bad_token(client):
    response = client.post(f"{API}/auth/google", json={"id_token": "forged"})
    assert response.status_code == 401


def test_google_login_conflicts_with_local_account(client, session, google_profiles):
    make_user(session, "taken@example.com")
    google_profiles["t"] = GoogleUserCreate(google_id="g-2", email="taken@example.com")

    response = client.post(f"{API}/auth/google", json={"id_token": "t"})

    assert response.status_code == 409


def test_google_only_account_cannot_use_password_login(client, google_profiles):
    google_profiles["t"] = GoogleUserCreate(google_id="g-3", email="fed@example.com")
    client.post(f"{API}/auth/google", json={"id_token": "t"})

    assert _login(client, "fed@example.com", password="anything").status_code == 401


def test_password_reset_flow(client, session, mailer):
    make_user(session, "a@example.com", password="OldPass123")
    _login(client, "a@example.com", password="OldPass123")

    response = client.post(f"{API}/auth/forgot-password", json={"email": "a@example.com"})
    assert response.status_code == 202
    (email, link), = mailer.password_resets
    assert email == "a@example.com"
    token = parse_qs(urlparse(link).query)["token"][0]

    response = client.post(
        f"{API}/auth/reset-password",
        json={"token": token, "new_password": "NewPass123"},
    )
    assert response.status_code == 200, response.text

    assert _login(client, "a@example.com", password="OldPass123").status_code == 401
    assert _login(client, "a@example.com", password="NewPass123").status_code == 200


def test_reset_link_works_only_once(client, session, mailer):
    make_user(session, "a@example.com", password="OldPass123")
    client.post(f"{API}/auth/forgot-password", json={"email": "a@example.com"})
    (_, link), = mailer.password_resets
    token = parse_qs(urlparse(link).query)["token"][0]

    response = client.post(
        f"{API}/auth/reset-password",
        json={"token": token, "new_password": "NewPass123"},
    )
    assert response.status_code == 200, response.text

    response = client.post(
        f"{API}/auth/reset-password",
        json={"token": token, "new_password": "Hijacked123"},
    )
    assert response.status_code == 401

    assert _login(client, "a@example.com", password="Hijacked123").status_code == 401
    assert _login(client, "a@example.com", password="NewPass123").status_code == 200


def test_forgot_password_for_unknown_email_sends_nothing(client, mailer):
    response = client.post(f"{API}/auth/forgot-password", json={"email": "ghost@example.com"})

    assert response.status_code == 202
    assert mailer.password_resets == []


def test_reset_password_rejects_garbage_token(client):
    response = client.post(
        f"{API}/auth/reset-password",
        json={"token": "garbage", "new_password": "NewPass123"},
    )
    assert response.status_code == 401
