"""Tests for authentication."""

from uuid import UUID

import pytest

from travelin_api.config import settings
from travelin_api.routers.auth import generate_session_token, hash_password, verify_password
from travelin_api.services import favorites as favorite_service

TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")


@pytest.fixture
def production_auth(monkeypatch):
    """Require Bearer session tokens instead of the dev X-User-Id header."""
    monkeypatch.setattr(settings, "auth_mode", "production")


async def _register(client, email="traveler@example.com", password="secret123", **extra):
    return await client.post(
        "/v1/auth/register", json={"email": email, "password": password, **extra}
    )


class TestPasswordHashing:
    """Tests for password hashing utilities."""

    def test_hash_password_returns_string(self):
        """Hash password should return a string."""
        result = hash_password("test_password")
        assert isinstance(result, str)
        assert len(result) > 0

    def test_hash_password_different_each_time(self):
        """Same password should produce different hashes (due to salt)."""
        assert hash_password("test_password") != hash_password("test_password")

    def test_verify_password_correct(self):
        hashed = hash_password("test_password")
        assert verify_password("test_password", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("correct_password")
        assert verify_password("wrong_password", hashed) is False


class TestSessionToken:
    """Tests for session token generation."""

    def test_generate_session_token_length(self):
        """Session token should be 64 characters (32 bytes hex)."""
        assert len(generate_session_token()) == 64

    def test_generate_session_token_unique(self):
        tokens = [generate_session_token() for _ in range(100)]
        assert len(set(tokens)) == 100

    def test_generate_session_token_hex(self):
        int(generate_session_token(), 16)  # Should not raise


class TestRegisterAndLogin:
    async def test_register(self, client):
        response = await _register(client, firstName="Ada", phone="+34 600 000 000")
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "traveler@example.com"
        assert data["user"]["firstName"] == "Ada"
        assert data["user"]["phone"] == "+34 600 000 000"
        assert len(data["session"]["token"]) == 64
        assert "passwordHash" not in data["user"]

    async def test_register_duplicate_email(self, client):
        await _register(client)
        response = await _register(client)
        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["detail"] == "User with this email already exists"
        assert error["source"]["parameter"] == "email"

    async def test_register_short_password(self, client):
        response = await _register(client, password="123")
        assert response.status_code == 400
        assert response.json()["errors"][0]["source"]["parameter"] == "password"

    async def test_register_invalid_email(self, client):
        response = await _register(client, email="not-an-email")
        assert response.status_code == 400
        assert response.json()["errors"][0]["source"]["parameter"] == "email"

    async def test_login(self, client):
        await _register(client)
        response = await client.post(
            "/v1/auth/login", json={"email": "traveler@example.com", "password": "secret123"}
        )
        assert response.status_code == 200
        assert len(response.json()["data"]["session"]["token"]) == 64

    async def test_login_wrong_password(self, client):
        await _register(client)
        response = await client.post(
            "/v1/auth/login", json={"email": "traveler@example.com", "password": "nope1234"}
        )
        assert response.status_code == 401
        error = response.json()["errors"][0]
        assert error["code"] == 38187
        assert error["detail"] == "Invalid email or password"

    async def test_login_unknown_email(self, client):
        response = await client.post(
            "/v1/auth/login", json={"email": "ghost@example.com", "password": "secret123"}
        )
        assert response.status_code == 401


class TestSessions:
    async def test_me_with_bearer_token(self, client, production_auth):
        registered = await _register(client)
        token = registered.json()["data"]["session"]["token"]

        response = await client.get("/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "traveler@example.com"

    async def test_me_without_token(self, client, production_auth):
        response = await client.get("/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["errors"][0]["source"]["parameter"] == "Authorization"

    async def test_me_with_unknown_token(self, client, production_auth):
        response = await client.get(
            "/v1/auth/me", headers={"Authorization": f"Bearer {generate_session_token()}"}
        )
        assert response.status_code == 401

    async def test_logout_invalidates_session(self, client, production_auth):
        registered = await _register(client)
        headers = {"Authorization": f"Bearer {registered.json()['data']['session']['token']}"}

        response = await client.post("/v1/auth/logout", headers=headers)
        assert response.status_code == 204

        response = await client.get("/v1/auth/me", headers=headers)
        assert response.status_code == 401

    async def test_bookings_require_token(self, client, production_auth):
        response = await client.get("/v1/bookings")
        assert response.status_code == 401

    async def test_availability_is_public(self, client, production_auth, barcelona_pois):
        response = await client.get(
            "/v1/bookings/availability",
            params={"poiId": "9CB40CB5D0", "startDate": "2030-01-01", "endDate": "2030-01-05"},
        )
        assert response.status_code == 200


class TestProfile:
    async def test_dev_mode_me(self, client):
        response = await client.get("/v1/auth/me", headers={"X-User-Id": str(TEST_USER_ID)})
        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "test@example.com"

    async def test_dev_mode_bad_user_id(self, client):
        response = await client.get("/v1/auth/me", headers={"X-User-Id": "not-a-uuid"})
        assert response.status_code == 400

    async def test_update_profile(self, client):
        response = await client.patch(
            "/v1/auth/me",
            json={"firstName": "Grace", "lastName": "Hopper"},
            headers={"X-User-Id": str(TEST_USER_ID)},
        )
        assert response.status_code == 200
        user = response.json()["data"]["user"]
        assert user["firstName"] == "Grace"
        assert user["lastName"] == "Hopper"
        assert user["email"] == "test@example.com"

    async def test_update_email_taken(self, client):
        response = await client.patch(
            "/v1/auth/me",
            json={"email": "other@example.com"},
            headers={"X-User-Id": str(TEST_USER_ID)},
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["detail"] == "Email is already in use"

    async def test_update_password_allows_login(self, client):
        registered = await _register(client)
        user_id = registered.json()["data"]["user"]["id"]

        response = await client.patch(
            "/v1/auth/me", json={"password": "brand-new-pw"}, headers={"X-User-Id": user_id}
        )
        assert response.status_code == 200

        response = await client.post(
            "/v1/auth/login", json={"email": "traveler@example.com", "password": "brand-new-pw"}
        )
        assert response.status_code == 200

    async def test_delete_account_removes_favorites(self, client, db_session, barcelona_pois):
        headers = {"X-User-Id": str(TEST_USER_ID)}
        await client.post("/v1/favorites", json={"poiId": "9CB40CB5D0"}, headers=headers)

        response = await client.delete("/v1/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Account deleted successfully"

        assert await favorite_service.favorite_count(db_session, "9CB40CB5D0") == 0

        response = await client.get("/v1/auth/me", headers=headers)
        assert response.status_code == 401
