"""Tests for the help page, liveness probe and application lifespan."""

from unittest.mock import MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from neometing.config import Settings
from neometing.infrastructure.lifecycle import build_registry
from neometing.infrastructure.providers import NeteaseProvider
from neometing.main import create_app


class TestHealthRouter:
    """Test help and liveness endpoints."""

    def test_help_lists_routes_and_providers(self, client: TestClient) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "/{provider}/playlist/{id}" in response.text
        assert "providers: netease" in response.text

    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/health/live")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "alive"
        assert body["providers"] == ["netease"]

    def test_missing_registry_is_503(self, test_settings: Settings) -> None:
        """Test requests before startup finished are refused."""
        client = TestClient(create_app(settings=test_settings))

        assert client.get("/health/live").status_code == 503
        assert client.get("/netease/song/1").status_code == 503


class TestLifespan:
    """Test startup and shutdown."""

    def test_shutdown_closes_providers(self, app: FastAPI, fake_provider: MagicMock) -> None:
        with TestClient(app) as client:
            assert client.get("/health/live").status_code == 200
            fake_provider.close.assert_not_awaited()

        fake_provider.close.assert_awaited_once()

    def test_startup_builds_registry(self, test_settings: Settings) -> None:
        app = create_app(settings=test_settings)

        with TestClient(app) as client:
            assert client.get("/health/live").json()["providers"] == ["netease"]
            assert isinstance(app.state.registry.get("netease"), NeteaseProvider)

    def test_restart_builds_fresh_clients(self, test_settings: Settings) -> None:
        """Test a second startup does not reuse clients closed by the first shutdown."""
        app = create_app(settings=test_settings)

        with TestClient(app):
            first = app.state.registry.get("netease")
        assert first.client._closed is True
        assert app.state.registry is None

        with TestClient(app) as client:
            assert client.get("/health/live").json()["providers"] == ["netease"]
            second = app.state.registry.get("netease")
            assert second is not first
            assert second.client._closed is False

    def test_build_registry(self, test_settings: Settings) -> None:
        registry = build_registry(test_settings)

        provider = registry.get("netease")
        assert isinstance(provider, NeteaseProvider)
        assert provider.client.permits._value == test_settings.netease.max_concurrent_requests
