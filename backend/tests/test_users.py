"""Tests for session authorization and the /api/users endpoints."""

import pytest

from app.models import User


class TestSessionAuthorization:
    """Protected routes need the current session id and a matching scope."""

    def test_no_cookie_is_unauthenticated(self, client):
        response = client.get("/api/users/me")
        assert response.status_code == 401
        data = response.json()
        assert data["error"]["code"] == "Unauthenticated"
        assert data["error"]["error"] == "Unauthorized"

    def test_unknown_session_is_unauthenticated(self, client, verified_user):
        client.cookies.set("session_id", "not-a-real-session")
        response = client.get("/api/users/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "Unauthenticated"

    def test_missing_scope_is_forbidden(self, user_client):
        response = user_client.get("/api/users/get-all-users")
        assert response.status_code == 403
        data = response.json()
        assert data["error"]["code"] == "Forbidden"
        assert data["error"]["error"] == "Forbidden"

    def test_admin_scope_allows_access(self, admin_client):
        response = admin_client.get("/api/users/get-all-users")
        assert response.status_code == 200

    def test_scope_is_read_from_the_database(self, user_client, db, verified_user):
        """Granting a scope takes effect on the next request without logging in again."""
        assert user_client.get("/api/users/get-all-users").status_code == 403

        verified_user.scope = ["user", "admin"]
        db.commit()

        assert user_client.get("/api/users/get-all-users").status_code == 200

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", "/api/users/get-all-users"),
            ("put", "/api/users/update-user-scope"),
            ("post", "/api/admin-pages/create-page"),
            ("get", "/api/admin-pages/edit-page/some-id"),
            ("put", "/api/admin-pages/edit-page/some-id"),
            ("delete", "/api/admin-pages/delete-page"),
            ("put", "/api/admin-pages/reorder-pages"),
        ],
    )
    def test_admin_routes_require_session(self, client, method, path):
        response = client.request(method.upper(), path, json={})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "Unauthenticated"


class TestCurrentUser:
    def test_get_me(self, user_client):
        response = user_client.get("/api/users/me")
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == "jane@example.com"
        assert user["first_name"] == "Jane"
        assert user["is_verified"] is True
        assert user["scope"] == ["user"]


class TestGetAllUsers:
    def test_lists_users_without_secrets(self, admin_client, make_user):
        make_user(email="other@example.com", is_verified=False)

        response = admin_client.get("/api/users/get-all-users")
        assert response.status_code == 200
        data = response.json()
        assert data["error"] is None
        emails = [u["email"] for u in data["users"]]
        assert emails == ["admin@example.com", "other@example.com"]
        for user in data["users"]:
            assert "password_hash" not in user
            assert "session_id" not in user


class TestUpdateUserScope:
    def test_grant_admin(self, admin_client, db, make_user):
        user = make_user(email="other@example.com")

        response = admin_client.put(
            "/api/users/update-user-scope",
            json={"user_id": user.user_id, "updated_scope": ["user", "admin"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["flash"] == "User scope updated successfully!"
        assert data["user_scope"] == ["user", "admin"]

        db.refresh(user)
        assert user.scope == ["user", "admin"]

    def test_user_scope_is_always_kept(self, admin_client, db, make_user):
        user = make_user(email="other@example.com", scope=["user", "admin"])

        response = admin_client.put(
            "/api/users/update-user-scope",
            json={"user_id": user.user_id, "updated_scope": []},
        )
        assert response.status_code == 200
        assert response.json()["user_scope"] == ["user"]

    def test_unknown_scope_rejected(self, admin_client, make_user):
        user = make_user(email="other@example.com")

        response = admin_client.put(
            "/api/users/update-user-scope",
            json={"user_id": user.user_id, "updated_scope": ["superuser"]},
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "ValidationError"

    def test_unknown_user(self, admin_client, db):
        response = admin_client.put(
            "/api/users/update-user-scope",
            json={"user_id": "missing", "updated_scope": ["user"]},
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "UserNotFound"
        assert db.query(User).count() == 1
