"""API tests for registration, login, current user and logout."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from conftest import bearer, make_settings
from harvest_hub.main import create_application
from harvest_hub.modules.user_management.repository import UserRepository
from harvest_hub.shared.core.security import SecurityManager

CREDENTIALS = {"email": "ada@example.com", "password": "tomatoes-4-all", "name": "Ada"}


class TestRegister:
    def test_register_returns_user_and_token(self, client, data_client):
        response = client.post("/api/auth/register", json={**CREDENTIALS, "phone": "555-0100"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "ada@example.com"
        assert body["user"]["phone"] == "555-0100"
        assert "password_hash" not in body["user"]
        assert body["token"]

        stored = data_client.rows("users", email="ada@example.com")
        assert len(stored) == 1
        assert stored[0]["password_hash"] != CREDENTIALS["password"]

    def test_missing_fields(self, client, data_client):
        response = client.post("/api/auth/register", json={"email": "ada@example.com", "password": "pw"})

        assert response.status_code == 400
        assert response.json()["error"] == "Email, password, and name are required"
        assert data_client.rows("users") == []

    def test_duplicate_email_is_rejected_without_insert(self, client, data_client):
        client.post("/api/auth/register", json=CREDENTIALS)

        response = client.post("/api/auth/register", json={**CREDENTIALS, "name": "Other Ada"})

        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"
        assert len(data_client.rows("users", email="ada@example.com")) == 1

    def test_unique_violation_on_insert_is_reported_as_existing_user(self, client, data_client, monkeypatch):
        data_client.seed("users", email="ada@example.com", password_hash="x", name="Ada")
        monkeypatch.setattr(UserRepository, "get_by_email", AsyncMock(return_value=None))

        response = client.post("/api/auth/register", json=CREDENTIALS)

        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"
        assert len(data_client.rows("users")) == 1

    def test_email_is_normalized(self, client, data_client):
        client.post("/api/auth/register", json={**CREDENTIALS, "email": "Ada@Example.COM"})

        assert len(data_client.rows("users", email="ada@example.com")) == 1

    def test_invalid_email_format(self, client):
        response = client.post("/api/auth/register", json={**CREDENTIALS, "email": "not-an-email"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_reserved_domain_is_rejected(self, client, data_client):
        response = client.post("/api/auth/register", json={**CREDENTIALS, "email": "a@garden.test"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert data_client.rows("users") == []

    def test_store_failure_on_insert(self, client, data_client):
        data_client.fail("users", "insert")

        response = client.post("/api/auth/register", json=CREDENTIALS)

        assert response.status_code == 500
        assert response.json()["error"] == "Error creating user"


class TestLogin:
    def test_login_returns_token_for_same_identity(self, client, register, settings):
        _, user = register(**CREDENTIALS)

        response = client.post(
            "/api/auth/login",
            json={"email": CREDENTIALS["email"], "password": CREDENTIALS["password"]},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert "password_hash" not in body["user"]

        claims = SecurityManager(settings).verify_token(body["token"])
        assert (claims.id, claims.email, claims.name) == (user["id"], user["email"], user["name"])

    def test_wrong_password_and_unknown_email_look_the_same(self, client, register):
        register(**CREDENTIALS)

        wrong_password = client.post(
            "/api/auth/login", json={"email": CREDENTIALS["email"], "password": "wrong"}
        )
        unknown_email = client.post(
            "/api/auth/login", json={"email": "nobody@example.com", "password": "wrong"}
        )

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.json()["error"] == "Invalid credentials"

    def test_email_case_is_ignored(self, client, register):
        register(**{**CREDENTIALS, "email": "Ada@Example.com"})

        response = client.post(
            "/api/auth/login", json={"email": "ADA@example.COM", "password": CREDENTIALS["password"]}
        )

        assert response.status_code == 200
        assert response.json()["user"]["email"] == "ada@example.com"

    def test_missing_fields(self, client):
        response = client.post("/api/auth/login", json={"email": "ada@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "Email and password are required"

    def test_store_failure(self, client, data_client):
        data_client.fail("users", "select")

        response = client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "pw"}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"


class TestMe:
    def test_returns_account_columns(self, client, register):
        token, user = register(**CREDENTIALS)

        response = client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 200
        me = response.json()["user"]
        assert set(me) == {"id", "email", "name", "phone", "created_at", "updated_at"}
        assert me["id"] == user["id"]

    @pytest.mark.parametrize(
        "headers, code",
        [
            ({}, "AUTH_HEADER_MISSING"),
            ({"Authorization": "Basic dXNlcjpwYXNz"}, "AUTH_SCHEME_INVALID"),
            ({"Authorization": "Bearer"}, "TOKEN_MISSING"),
            ({"Authorization": "Bearer not.a.token"}, "TOKEN_INVALID"),
        ],
    )
    def test_rejections_are_distinct(self, client, headers, code):
        response = client.get("/api/auth/me", headers=headers)

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["code"] == code

    def test_expired_token(self, client, register, settings):
        _, user = register(**CREDENTIALS)
        issued = datetime.now(timezone.utc) - timedelta(days=8)
        token = SecurityManager(settings).create_access_token(user, issued_at=issued)

        response = client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_EXPIRED"

    def test_deleted_user(self, client, register, data_client):
        token, _ = register(**CREDENTIALS)
        data_client.tables["users"].clear()

        response = client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"


def test_logout(client):
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Logged out successfully"}


def login_attempt(client):
    return client.post("/api/auth/login", json={"email": "a@example.com", "password": "pw"})


class TestRateLimiting:
    def test_auth_endpoints_are_rate_limited(self, data_client, media_store):
        settings = make_settings(RATE_LIMIT_ENABLED=True, AUTH_RATE_LIMIT="2/minute")
        app = create_application(settings=settings, data_client=data_client, media_store=media_store)

        with TestClient(app) as client:
            statuses = [login_attempt(client).status_code for _ in range(3)]
            last = login_attempt(client)
            register_status = client.post("/api/auth/register", json=CREDENTIALS).status_code

        assert statuses == [401, 401, 429]
        assert last.json()["code"] == "RATE_LIMIT_EXCEEDED"
        assert register_status == 201

    def test_each_application_keeps_its_own_limits(self, data_client, media_store):
        limited = create_application(
            settings=make_settings(RATE_LIMIT_ENABLED=True, AUTH_RATE_LIMIT="1/minute"),
            data_client=data_client,
            media_store=media_store,
        )
        unlimited = create_application(
            settings=make_settings(RATE_LIMIT_ENABLED=False),
            data_client=data_client,
            media_store=media_store,
        )

        with TestClient(limited) as limited_client, TestClient(unlimited) as unlimited_client:
            limited_statuses = [login_attempt(limited_client).status_code for _ in range(2)]
            unlimited_statuses = [login_attempt(unlimited_client).status_code for _ in range(3)]

        assert limited_statuses == [401, 429]
        assert unlimited_statuses == [401, 401, 401]
