"""
Tests for health check endpoints and the error handlers.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.errors import register_exception_handlers


class TestHealth:
    def test_basic(self, test_client):
        response = test_client.get("/health/")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "TubeShare API"}

    def test_database(self, test_client):
        response = test_client.get("/health/db")
        assert response.json()["status"] == "healthy"
        assert response.json()["dialect"] == "sqlite"

    def test_redis(self, test_client):
        assert test_client.get("/health/redis").json()["status"] == "healthy"

    def test_redis_down(self, test_client, mock_arq_redis):
        mock_arq_redis.ping.side_effect = ConnectionError("refused")

        body = test_client.get("/health/redis").json()

        assert body["status"] == "unhealthy"
        assert "refused" in body["error"]


@pytest.fixture
def failing_client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


class TestUnhandledErrors:
    def test_stack_in_development(self, failing_client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "development")

        response = failing_client.get("/boom")

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal Server Error"
        assert "kaboom" in response.json()["stack"]

    def test_no_stack_in_production(self, failing_client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        response = failing_client.get("/boom")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal Server Error"}
