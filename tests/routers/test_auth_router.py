"""
Tests for the /api/auth endpoints, using real bearer tokens.
"""

import pytest

from app.core.config import settings


def register(client, username="carol", email="carol@example.com", password="s3cret-pass", files=None):
    return client.post(
        "/api/auth/register",
        data={"username": username, "email": email, "password": password},
        files=files,
    )


def login(client, email="carol@example.com", password="s3cret-pass"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.mark.asyncio
class TestRegister:
    async def test_register(self, auth_client):
        response = register(auth_client)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["username"] == "carol"
        assert body["user"]["email"] == "carol@example.com"
        assert body["user"]["channels"] == []
        assert "hashed_password" not in body["user"]
        assert "password" not in body["user"]

    async def test_register_with_profile_picture(self, auth_client, fake_media_store):
        response = register(
            auth_client, files={"profile_pic": ("me.jpg", b"jpeg-bytes", "image/jpeg")}
        )

        assert response.status_code == 201
        assert response.json()["user"]["profile_pic_url"].startswith("https://media.test/")
        assert len(fake_media_store.uploads) == 1

    async def test_duplicate_email_is_400(self, auth_client):
        register(auth_client)

        response = register(auth_client, username="carol2", email="CAROL@example.com")

        assert response.status_code == 400

    async def test_invalid_email_is_400(self, auth_client):
        assert register(auth_client, email="not-an-email").status_code == 400

    async def test_missing_fields_are_400(self, auth_client):
        response = auth_client.post("/api/auth/register", data={"username": "carol"})
        assert response.status_code == 400


@pytest.mark.asyncio
class TestLogin:
    async def test_login_returns_token(self, auth_client):
        register(auth_client)

        response = login(auth_client)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["token"]
        assert body["user"]["username"] == "carol"

    async def test_unknown_email_is_404(self, auth_client):
        assert login(auth_client, email="nobody@example.com").status_code == 404

    async def test_wrong_password_is_401(self, auth_client):
        register(auth_client)
        assert login(auth_client, password="wrong").status_code == 401

    async def test_uniform_errors(self, auth_client, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_UNIFORM_LOGIN_ERRORS", True)
        register(auth_client)

        assert login(auth_client, email="nobody@example.com").status_code == 401
        assert login(auth_client, password="wrong").status_code == 401


@pytest.mark.asyncio
class TestMe:
    async def test_me_with_token(self, auth_client):
        register(auth_client)
        token = login(auth_client).json()["token"]

        response = auth_client.get(
            "/api/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 200
        assert response.json()["email"] == "carol@example.com"

    async def test_me_without_token_is_401(self, auth_client):
        assert auth_client.get("/api/auth/me").status_code == 401

    async def test_me_with_garbage_token_is_401(self, auth_client):
        response = auth_client.get(
            "/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    async def test_token_works_on_protected_routes(self, auth_client):
        register(auth_client)
        token = login(auth_client).json()["token"]

        response = auth_client.post(
            "/api/channels",
            data={"channel_name": "Carol Cooks"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 201

    async def test_update_username(self, auth_client):
        register(auth_client)
        token = login(auth_client).json()["token"]

        response = auth_client.put(
            "/api/auth/me",
            data={"username": "caroline"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 200
        assert response.json()["username"] == "caroline"
