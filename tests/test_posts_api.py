"""Tests for greeting posts: submission, visibility and moderation."""

from __future__ import annotations

from sqlmodel import select

from app.models.post import Post
from conftest import auth_headers, make_user

API = "/api/v1"

GREETING = {
    "body": "Happy birthday!",
    "media": [
        {"type": "image", "url": "https://cdn.example.com/cake.png"},
        {"type": "audio", "url": "https://cdn.example.com/song.mp3"},
    ],
}


def _post(client, user, payload=GREETING):
    return client.post(f"{API}/posts", json=payload, headers=auth_headers(user))


def test_new_post_starts_in_processing(client, session):
    user = make_user(session, "a@example.com")

    response = _post(client, user)

    assert response.status_code == 201, response.text
    post = response.json()
    assert post["status"] == "processing"
    assert post["score"] is None
    assert post["user_id"] == str(user.id)
    assert [m["type"] for m in post["media"]] == ["image", "audio"]


def test_unconfirmed_user_cannot_post(client, session):
    user = make_user(session, "a@example.com", confirmed=False)

    assert _post(client, user).status_code == 403


def test_post_validation(client, session):
    user = make_user(session, "a@example.com")

    assert _post(client, user, {"body": "   "}).status_code == 422
    assert _post(client, user, {"body": "hi", "status": "approved"}).status_code == 422
    bad_media = {"body": "hi", "media": [{"type": "pdf", "url": "x"}]}
    assert _post(client, user, bad_media).status_code == 422


def test_only_approved_posts_are_public(client, session):
    admin = make_user(session, "admin@example.com", role="admin")
    author = make_user(session, "a@example.com")
    first = _post(client, author).json()
    _post(client, author, {"body": "Second"})

    assert client.get(f"{API}/posts").json()["total_count"] == 0
    assert client.get(f"{API}/posts/{first['id']}").status_code == 404
    assert client.get(f"{API}/posts/{first['id']}", headers=auth_headers(author)).status_code == 200

    response = client.patch(
        f"{API}/posts/{first['id']}/moderation",
        json={"status": "approved", "score": 8.5},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200, response.text
    assert response.json()["score"] == 8.5

    public = client.get(f"{API}/posts").json()
    assert [p["id"] for p in public["posts"]] == [first["id"]]
    assert public["next_offset"] is None
    assert client.get(f"{API}/posts/{first['id']}").status_code == 200

    mine = client.get(f"{API}/posts/me", headers=auth_headers(author)).json()
    assert mine["total_count"] == 2


def test_review_queue_filters_by_status(client, session):
    admin = make_user(session, "admin@example.com", role="admin")
    author = make_user(session, "a@example.com")
    _post(client, author)

    response = client.get(
        f"{API}/posts/review",
        params={"status": "processing"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200
    assert response.json()["total_count"] == 1

    response = client.get(
        f"{API}/posts/review",
        params={"status": "rejected"},
        headers=auth_headers(admin),
    )
    assert response.json()["total_count"] == 0

    assert client.get(f"{API}/posts/review", headers=auth_headers(author)).status_code == 403


def test_moderation_needs_a_change_and_valid_score(client, session):
    admin = make_user(session, "admin@example.com", role="admin")
    post = _post(client, make_user(session, "a@example.com")).json()
    url = f"{API}/posts/{post['id']}/moderation"

    assert client.patch(url, json={}, headers=auth_headers(admin)).status_code == 422
    assert client.patch(url, json={"score": 11}, headers=auth_headers(admin)).status_code == 422


def test_moderation_rejects_null_status_but_clears_score(client, session):
    admin = make_user(session, "admin@example.com", role="admin")
    post = _post(client, make_user(session, "a@example.com")).json()
    url = f"{API}/posts/{post['id']}/moderation"

    response = client.patch(url, json={"status": None}, headers=auth_headers(admin))
    assert response.status_code == 422

    response = client.patch(url, json={"status": "approved", "score": 8}, headers=auth_headers(admin))
    assert response.status_code == 200, response.text

    response = client.patch(url, json={"score": None}, headers=auth_headers(admin))
    assert response.status_code == 200, response.text
    assert response.json()["status"] == "approved"
    assert response.json()["score"] is None


def test_delete_post_permissions(client, session):
    author = make_user(session, "a@example.com")
    other = make_user(session, "b@example.com")
    admin = make_user(session, "admin@example.com", role="admin")
    first = _post(client, author).json()
    second = _post(client, author).json()

    assert client.delete(f"{API}/posts/{first['id']}", headers=auth_headers(other)).status_code == 403
    assert client.delete(f"{API}/posts/{first['id']}", headers=auth_headers(author)).status_code == 204
    assert client.delete(f"{API}/posts/{second['id']}", headers=auth_headers(admin)).status_code == 204
    assert client.delete(f"{API}/posts/{second['id']}", headers=auth_headers(admin)).status_code == 404


def test_deleting_account_removes_its_posts(client, session):
    author = make_user(session, "a@example.com")
    _post(client, author)

    assert client.delete(f"{API}/users/me", headers=auth_headers(author)).status_code == 204

    session.expire_all()
    assert session.exec(select(Post)).all() == []
