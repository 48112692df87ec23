"""Tests for the session endpoints (login, who-am-I, logout)."""

from datetime import timedelta

import jwt
import pytest

from blog_api.services.auth import create_access_token, decode_token
from tests.conftest import TEST_USER_EMAIL, TEST_USER_PASSWORD

pytestmark = pytest.mark.asyncio


class TestCreateSession:
    """POST /session."""

    async def test_returns_token_and_user(self, async_client, user):
        response = await async_client.post(
            "/session",
            json={"email": TEST_USER_EMAIL, "password": TEST_USER_PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert decode_token(data["token"])["sub"] == str(user.id)
        assert data["user"] == {"id": str(user.id), "email": TEST_USER_EMAIL}

    async def test_user_excludes_sensitive_fields(self, async_client, user):
        response = await async_client.post(
            "/session",
            json={"email": TEST_USER_EMAIL, "password": TEST_USER_PASSWORD},
        )
        returned_user = response.json()["user"]
        assert "password_hash" not in returned_user
        assert "created_at" not in returned_user
        assert "updated_at" not in returned_user

    async def test_token_expires_in_24_hours(self, async_client, user):
        from datetime import UTC, datetime

        response = await async_client.post(
            "/session",
            json={"email": TEST_USER_EMAIL, "password": TEST_USER_PASSWORD},
        )
        exp = decode_token(response.json()["token"])["exp"]
        expected = (datetime.now(UTC) + timedelta(hours=24)).timestamp()
        assert abs(exp - expected) < 5

    async def test_invalid_credentials(self, async_client, user):
        response = await async_client.post(
            "/session",
            json={"email": TEST_USER_EMAIL, "password": "wrongpassword"},
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    async def test_missing_email(self, async_client, user):
        response = await async_client.post("/session", json={"password": TEST_USER_PASSWORD})
        assert response.status_code == 401

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": ["x"], "password": 5},
            {"email": TEST_USER_EMAIL, "password": {"value": TEST_USER_PASSWORD}},
            {"email": 42, "password": TEST_USER_PASSWORD},
        ],
    )
    async def test_non_string_credentials(self, async_client, user, payload):
        response = await async_client.post("/session", json=payload)
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}


class TestGetSession:
    """GET /session uses the soft gate."""

    async def test_authenticated(self, async_client, user, auth_headers):
        response = await async_client.get("/session", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["authenticated"] is True
        assert data["user"]["email"] == user.email
        assert "password_hash" not in data["user"]

    async def test_without_token(self, async_client):
        response = await async_client.get("/session")
        assert response.status_code == 401
        assert response.json() == {"authenticated": False}

    async def test_with_tampered_token(self, async_client, user, auth_headers):
        signed_part = auth_headers["Authorization"].rsplit(".", 1)[0]
        tampered = f"{signed_part}.{'A' * 43}"
        response = await async_client.get("/session", headers={"Authorization": tampered})
        assert response.status_code == 401
        assert response.json() == {"authenticated": False}

    async def test_with_expired_token(self, async_client, user):
        token = create_access_token(user.id, user.email, expires_delta=timedelta(seconds=-1))
        response = await async_client.get(
            "/session", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401
        assert response.json() == {"authenticated": False}

    async def test_with_token_signed_by_other_secret(self, async_client, user):
        token = jwt.encode(
            {"sub": str(user.id), "exp": 9999999999},
            "a-completely-different-secret-value-000",
            algorithm="HS256",
        )
        response = await async_client.get(
            "/session", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401


class TestDeleteSession:
    """DELETE /session always succeeds."""

    async def test_without_token(self, async_client):
        response = await async_client.delete("/session")
        assert response.status_code == 200
        assert response.json() == {"message": "Logged out successfully"}

    async def test_with_token(self, async_client, auth_headers):
        response = await async_client.delete("/session", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"

    async def test_with_garbage_token(self, async_client):
        response = await async_client.delete(
            "/session", headers={"Authorization": "Bearer not-a-token"}
        )
        assert response.status_code == 200
