from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from backend.app import models
from backend.app.security import TOKEN_TYPE_REFRESH, decode_token

USER_PASSWORD = "Us3rSecret"

RESET_LINK = re.compile(r"/reset-password/([0-9a-f]{40})")


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_returns_tokens_and_sends_welcome(client, mailbox, db_session):
    response = client.post(
        "/api/auth/register",
        json={"name": "Ada Lovelace", "email": "Ada@Example.com", "password": "Engine42"},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["user"]["email"] == "ada@example.com"
    assert payload["user"]["role"] == "user"
    assert "passwordHash" not in payload["user"]
    assert decode_token(payload["refreshToken"], TOKEN_TYPE_REFRESH)["sub"] == payload["user"]["id"]

    assert mailbox.records[0]["destination"] == "ada@example.com"
    assert mailbox.records[0]["subject"] == "Welcome to Portfolio!"
    stored = db_session.query(models.User).filter_by(email="ada@example.com").one()
    assert stored.password_hash != "Engine42"


def test_register_rejects_duplicates_and_weak_passwords(client, regular_user):
    duplicate = client.post(
        "/api/auth/register",
        json={"name": "Someone", "email": "USER@example.com", "password": "Passw0rd"},
    )
    weak = client.post(
        "/api/auth/register",
        json={"name": "Someone", "email": "new@example.com", "password": "password"},
    )

    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "User already exists with this email"
    assert weak.status_code == 400
    assert weak.json()["errors"][0]["field"] == "password"


def test_login_and_me(client, regular_user):
    response = client.post(
        "/api/auth/login", json={"email": "User@Example.com", "password": USER_PASSWORD}
    )

    assert response.status_code == 200
    token = response.json()["token"]
    assert response.json()["user"]["lastLogin"] is not None

    me = client.get("/api/auth/me", headers=_bearer(token))
    assert me.json()["data"]["email"] == "user@example.com"


def test_login_failures(client, regular_user, db_session):
    wrong = client.post("/api/auth/login", json={"email": "user@example.com", "password": "nope"})
    unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert wrong.status_code == 401
    assert wrong.json() == {"success": False, "message": "Invalid credentials"}
    assert unknown.json()["message"] == "Invalid credentials"

    regular_user.is_active = False
    db_session.commit()
    inactive = client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
    )
    assert inactive.status_code == 401
    assert inactive.json()["message"] == "Your account has been deactivated"


def test_protected_routes_reject_bad_tokens(client, regular_user):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers=_bearer("not.a.token")).status_code == 401

    login = client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
    ).json()
    # A refresh token cannot be used as an access token.
    assert client.get("/api/auth/me", headers=_bearer(login["refreshToken"])).status_code == 401


def test_refresh_token_issues_new_pair(client, regular_user):
    login = client.post(
        "/api/auth/login", json={"email": "user@example.com", "password": USER_PASSWORD}
    ).json()

    refreshed = client.post("/api/auth/refresh-token", json={"refreshToken": login["refreshToken"]})
    rejected = client.post("/api/auth/refresh-token", json={"refreshToken": login["token"]})

    assert refreshed.status_code == 200
    assert refreshed.json()["user"]["id"] == regular_user.id
    assert rejected.status_code == 401
    assert rejected.json()["message"] == "Invalid refresh token"


def test_logout_requires_authentication(client, user_client):
    assert client.post("/api/auth/logout").status_code == 401
    assert user_client.post("/api/auth/logout").json() == {
        "success": True,
        "message": "Logged out successfully",
    }


def test_update_profile_ignores_role_escalation(user_client, regular_user, db_session):
    response = user_client.put(
        "/api/auth/update-profile",
        json={"name": "Renamed", "bio": "Hello <script>x()</script>world", "role": "admin"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Renamed"
    assert data["bio"] == "Hello world"
    db_session.expire_all()
    assert db_session.get(models.User, regular_user.id).role.value == "user"


def test_update_password(user_client, client):
    wrong = user_client.put(
        "/api/auth/update-password",
        json={"currentPassword": "wrong", "newPassword": "N3wSecret"},
    )
    changed = user_client.put(
        "/api/auth/update-password",
        json={"currentPassword": USER_PASSWORD, "newPassword": "N3wSecret"},
    )

    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Current password is incorrect"
    assert changed.status_code == 200
    assert changed.json()["token"]
    login = client.post("/api/auth/login", json={"email": "user@example.com", "password": "N3wSecret"})
    assert login.status_code == 200


def test_forgot_and_reset_password_flow(client, regular_user, mailbox):
    forgot = client.post("/api/auth/forgot-password", json={"email": "user@example.com"})

    assert forgot.json() == {"success": True, "message": "Password reset email sent"}
    email = mailbox.records[-1]
    assert email["subject"] == "Password Reset Request"
    token = RESET_LINK.search(email["plain_text"]).group(1)

    reset = client.post(f"/api/auth/reset-password/{token}", json={"password": "Fr3shStart"})
    assert reset.status_code == 200
    assert reset.json()["user"]["email"] == "user@example.com"

    reused = client.post(f"/api/auth/reset-password/{token}", json={"password": "Fr3shStart"})
    assert reused.status_code == 400
    assert reused.json()["message"] == "Invalid or expired reset token"

    login = client.post("/api/auth/login", json={"email": "user@example.com", "password": "Fr3shStart"})
    assert login.status_code == 200


def test_forgot_password_for_unknown_email(client, mailbox):
    response = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})

    assert response.status_code == 404
    assert response.json()["message"] == "No user found with that email"
    assert mailbox.records == []


def test_expired_reset_token_is_rejected(client, regular_user, mailbox, db_session):
    client.post("/api/auth/forgot-password", json={"email": "user@example.com"})
    token = RESET_LINK.search(mailbox.records[-1]["plain_text"]).group(1)

    db_session.expire_all()
    user = db_session.get(models.User, regular_user.id)
    user.reset_token_expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db_session.commit()

    response = client.post(f"/api/auth/reset-password/{token}", json={"password": "Fr3shStart"})
    assert response.status_code == 400
