"""
projects_api/test_auth.py

Registration, login and /auth/me behavior.

Run:
    pytest projects_api/test_auth.py -v
"""

from datetime import datetime, timedelta, timezone

import jwt
from sqlalchemy import text

from conftest import DEFAULT_PASSWORD, auth_headers, register
from projects_api.config import ALGORITHM, SECRET_KEY
from projects_api.security import TokenCodec


class TestRegister:
    def test_register_returns_user_and_token(self, client):
        response = client.post(
            "/auth/register",
            json={"name": "John Doe", "email": "john@example.com", "password": "securepassword123"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["token"]
        user = body["data"]["user"]
        assert user["email"] == "john@example.com"
        assert user["name"] == "John Doe"
        assert user["role"] == "user"
        assert "password_hash" not in user
        assert "password" not in user

    def test_password_is_stored_hashed(self, app, client):
        register(client, "hashed@example.com", password="plaintext-secret")

        with app.state.engine.connect() as conn:
            stored = conn.execute(
                text("SELECT password_hash FROM users WHERE email = :email"),
                {"email": "hashed@example.com"},
            ).scalar_one()
        assert stored != "plaintext-secret"
        assert stored.startswith("$argon2")

    def test_duplicate_email_conflicts(self, client):
        register(client, "dup@example.com", name="First")

        response = client.post(
            "/auth/register",
            json={"name": "Someone Else", "email": "dup@example.com", "password": "differentpass"},
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_email_match_is_case_sensitive(self, client):
        register(client, "Case@example.com")
        register(client, "case@example.com")

    def test_register_reports_every_invalid_field(self, client):
        response = client.post("/auth/register", json={"name": "", "email": "not-an-email", "password": "short"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {d["field"] for d in error["details"]}
        assert fields == {"name", "email", "password"}
        messages = {d["field"]: d["message"] for d in error["details"]}
        assert messages["password"] == "Password must be at least 8 characters"

    def test_register_missing_fields(self, client):
        response = client.post("/auth/register", json={})

        assert response.status_code == 400
        fields = {d["field"] for d in response.json()["error"]["details"]}
        assert fields == {"name", "email", "password"}


class TestLogin:
    def test_login_returns_token(self, client, user_a):
        response = client.post("/auth/login", json={"email": "user1@example.com", "password": DEFAULT_PASSWORD})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["token"]
        assert data["user"]["id"] == user_a["user"]["id"]
        assert "password_hash" not in data["user"]

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client, user_a):
        wrong_password = client.post("/auth/login", json={"email": "user1@example.com", "password": "wrongpassword"})
        unknown_email = client.post("/auth/login", json={"email": "nobody@example.com", "password": "wrongpassword"})

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == {
            "code": "UNAUTHORIZED",
            "message": "Invalid email or password.",
        }

    def test_login_is_case_sensitive_on_email(self, client, user_a):
        response = client.post("/auth/login", json={"email": "USER1@example.com", "password": DEFAULT_PASSWORD})

        assert response.status_code == 401

    def test_login_requires_password(self, client):
        response = client.post("/auth/login", json={"email": "user1@example.com", "password": ""})

        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "password"


class TestMe:
    def test_me_returns_sanitized_user(self, client, user_a):
        response = client.get("/auth/me", headers=auth_headers(user_a["token"]))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "user1@example.com"
        assert data["role"] == "user"
        assert "password_hash" not in data

    def test_missing_header(self, client):
        response = client.get("/auth/me")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_prefix_must_be_exact(self, client, user_a):
        token = user_a["token"]
        for header in (f"bearer {token}", f"Token {token}", token, f"Bearer{token}"):
            response = client.get("/auth/me", headers={"Authorization": header})
            assert response.status_code == 401, header

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers=auth_headers("not-a-jwt"))

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid or expired token."

    def test_expired_token(self, client, user_a):
        expired = TokenCodec(SECRET_KEY, ALGORITHM, expires_minutes=-5).sign(user_a["user"]["id"], "user")

        response = client.get("/auth/me", headers=auth_headers(expired))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_token_signed_with_other_secret(self, client, user_a):
        forged = TokenCodec("some-other-secret-key", ALGORITHM).sign(user_a["user"]["id"], "admin")

        response = client.get("/auth/me", headers=auth_headers(forged))

        assert response.status_code == 401

    def test_token_with_unknown_role(self, client, user_a):
        payload = {
            "sub": user_a["user"]["id"],
            "role": "superuser",
            "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        }
        token = jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)

        response = client.get("/auth/me", headers=auth_headers(token))

        assert response.status_code == 401

    def test_deleted_user_is_not_found(self, app, client, user_a):
        with app.state.engine.begin() as conn:
            conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": user_a["user"]["id"]})

        response = client.get("/auth/me", headers=auth_headers(user_a["token"]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"
