from __future__ import annotations

from datetime import datetime, timedelta, timezone

from backend.app import models
from backend.app.enums import UserRole
from backend.app.security import generate_password_hash


def _add_users(db_session, count: int, **overrides) -> list[models.User]:
    now = datetime.now(timezone.utc)
    users = []
    for index in range(count):
        payload = {
            "name": f"Member {index:02d}",
            "email": f"member{index:02d}@example.com",
            "password_hash": generate_password_hash("Passw0rd", iterations=1_000),
            "created_at": now - timedelta(days=index + 1),
        }
        payload.update(overrides)
        users.append(models.User(**payload))
    db_session.add_all(users)
    db_session.commit()
    return users


def test_users_endpoints_require_admin(client, user_client):
    assert client.get("/api/users/").status_code == 401
    response = user_client.get("/api/users/stats")
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_list_users_is_paginated_newest_first(admin_client, db_session):
    _add_users(db_session, 12)

    first = admin_client.get("/api/users/", params={"limit": 5}).json()
    last = admin_client.get("/api/users/", params={"limit": 5, "page": 3}).json()

    assert first["pagination"] == {"page": 1, "limit": 5, "total": 13, "pages": 3}
    assert first["data"][0]["email"] == "admin@example.com"
    assert first["data"][1]["email"] == "member00@example.com"
    assert last["count"] == 3
    assert all("passwordHash" not in item for item in first["data"])


def test_list_users_rejects_invalid_window(admin_client):
    response = admin_client.get("/api/users/", params={"page": 0})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_user_stats(admin_client, db_session):
    _add_users(db_session, 2)
    _add_users(
        db_session,
        1,
        email="old@example.com",
        created_at=datetime.now(timezone.utc) - timedelta(days=90),
        is_active=False,
    )

    stats = admin_client.get("/api/users/stats").json()["data"]

    assert stats == {
        "totalUsers": 4,
        "activeUsers": 3,
        "adminUsers": 1,
        "newUsersLast30Days": 3,
    }


def test_get_and_update_user(admin_client, regular_user):
    fetched = admin_client.get(f"/api/users/{regular_user.id}")
    updated = admin_client.put(
        f"/api/users/{regular_user.id}", json={"role": "admin", "isActive": False}
    )

    assert fetched.json()["data"]["email"] == "user@example.com"
    assert updated.json()["data"]["role"] == "admin"
    assert updated.json()["data"]["isActive"] is False
    assert admin_client.get("/api/users/unknown").status_code == 404


def test_deactivated_user_loses_access(admin_client, user_client, regular_user):
    admin_client.put(f"/api/users/{regular_user.id}", json={"isActive": False})

    assert user_client.get("/api/auth/me").status_code == 401


def test_admin_cannot_delete_own_account(admin_client, admin_user):
    response = admin_client.delete(f"/api/users/{admin_user.id}")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "You cannot delete your own account"}


def test_admin_deletes_other_account(admin_client, regular_user, db_session):
    response = admin_client.delete(f"/api/users/{regular_user.id}")

    assert response.json() == {"success": True, "message": "User deleted successfully"}
    db_session.expire_all()
    assert db_session.get(models.User, regular_user.id) is None
    assert (
        db_session.query(models.User).filter(models.User.role == UserRole.ADMIN).count() == 1
    )
