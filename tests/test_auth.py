"""
QA Scenario Hub
Tests — registration, login, JWT guard, user directory.
"""

import pytest

from app.models.auth import User
from app.utils.crypto import verify_password
from tests.conftest import auth_headers, make_user


def _register(client, **overrides):
    payload = {
        "name": "Kim Tester",
        "email": "kim@monandol.io",
        "password": "secret123",
        "confirm_password": "secret123",
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


class TestRegister:
    def test_register_success(self, client):
        res = _register(client)
        assert res.status_code == 201
        body = res.get_json()
        assert body["success"] is True
        assert body["data"]["user"]["email"] == "kim@monandol.io"
        assert "password_hash" not in body["data"]["user"]

        user = User.query.filter_by(email="kim@monandol.io").first()
        assert user is not None
        assert user.password_hash != "secret123"
        assert verify_password("secret123", user.password_hash)

    def test_email_is_lowercased(self, client):
        res = _register(client, email="Kim.Lee@Monandol.io")
        assert res.status_code == 201
        assert res.get_json()["data"]["user"]["email"] == "kim.lee@monandol.io"

    def test_wrong_domain_rejected(self, client):
        res = _register(client, email="kim@gmail.com")
        assert res.status_code == 400
        assert res.get_json()["error"]["code"] == "INVALID_EMAIL_DOMAIN"

    def test_duplicate_email_conflict(self, client):
        assert _register(client).status_code == 201
        res = _register(client)
        assert res.status_code == 409
        assert res.get_json()["error"]["code"] == "USER_EXISTS"

    @pytest.mark.parametrize("password", ["short1", "onlyletters", "12345678"])
    def test_weak_password_rejected(self, client, password):
        res = _register(client, password=password, confirm_password=password)
        assert res.status_code == 400
        err = res.get_json()["error"]
        assert err["code"] == "VALIDATION_ERROR"
        assert "password" in err["details"]

    def test_password_mismatch_rejected(self, client):
        res = _register(client, confirm_password="different123")
        assert res.status_code == 400
        assert "confirm_password" in res.get_json()["error"]["details"]

    def test_invalid_email_syntax_rejected(self, client):
        res = _register(client, email="not-an-email")
        assert res.status_code == 400
        assert "email" in res.get_json()["error"]["details"]


class TestLogin:
    def test_login_returns_token(self, client):
        _register(client)
        res = client.post("/api/v1/auth/login", json={"email": "kim@monandol.io", "password": "secret123"})
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["token_type"] == "Bearer"

        me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.status_code == 200
        assert me.get_json()["data"]["email"] == "kim@monandol.io"

    def test_wrong_password_unauthorized(self, client):
        _register(client)
        res = client.post("/api/v1/auth/login", json={"email": "kim@monandol.io", "password": "wrong1234"})
        assert res.status_code == 401
        assert res.get_json()["error"]["code"] == "UNAUTHORIZED"

    def test_missing_fields(self, client):
        res = client.post("/api/v1/auth/login", json={})
        assert res.status_code == 400


class TestJwtGuard:
    def test_missing_token(self, client):
        res = client.get("/api/v1/projects")
        assert res.status_code == 401
        assert res.get_json() == {
            "success": False,
            "error": {"code": "UNAUTHORIZED", "message": "Authentication required"},
        }

    def test_garbage_token(self, client):
        res = client.get("/api/v1/projects", headers={"Authorization": "Bearer nope"})
        assert res.status_code == 401

    def test_signing_key_meets_hs256_minimum(self, app):
        assert len(app.config["SECRET_KEY"].encode()) >= 32

    def test_health_is_public(self, client):
        assert client.get("/api/v1/health/ready").status_code == 200
        live = client.get("/api/v1/health/live")
        assert live.status_code == 200
        assert live.get_json()["checks"]["database"]["status"] == "ok"


class TestUsers:
    def test_list_users_ordered_by_name(self, client):
        zed = make_user("zed@monandol.io", name="Zed")
        make_user("amy@monandol.io", name="Amy")
        res = client.get("/api/v1/users", headers=auth_headers(zed))
        assert res.status_code == 200
        users = res.get_json()["data"]
        assert [u["name"] for u in users] == ["Amy", "Zed"]
        assert set(users[0]) == {"id", "name", "email"}


class TestEnvelope:
    def test_unknown_api_route_is_enveloped(self, client):
        res = client.get("/api/v1/nope")
        assert res.status_code == 404
        assert res.get_json()["error"]["code"] == "NOT_FOUND"

    def test_wrong_content_type_rejected(self, client, owner_headers):
        res = client.post("/api/v1/projects", data="title=x", headers={
            **owner_headers, "Content-Type": "text/plain",
        })
        assert res.status_code == 415
        assert res.get_json()["error"]["code"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_security_headers_present(self, client):
        res = client.get("/api/v1/health/ready")
        assert res.headers["X-Content-Type-Options"] == "nosniff"
        assert "X-Request-ID" in res.headers

    def test_non_object_json_body_rejected(self, client, owner_headers):
        res = client.post("/api/v1/projects", json=["x"], headers=owner_headers)
        assert res.status_code == 400
        err = res.get_json()["error"]
        assert err["code"] == "VALIDATION_ERROR"
        assert "body" in err["details"]

    def test_non_object_login_body_rejected(self, client):
        assert client.post("/api/v1/auth/login", json="kim@monandol.io").status_code == 400
