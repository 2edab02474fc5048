"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from neometing.config import NeteaseSettings, ObservabilitySettings, Settings
from neometing.domain.ports import IMusicProvider
from neometing.infrastructure.providers import ProviderRegistry
from neometing.main import create_app


class FakeProvider(IMusicProvider):
    """Provider whose operations are AsyncMocks, configured per test."""

    def __init__(self) -> None:
        self.resolve_playback_url = AsyncMock()  # type: ignore[method-assign]
        self.resolve_cover = AsyncMock()  # type: ignore[method-assign]
        self.resolve_lyrics = AsyncMock()  # type: ignore[method-assign]
        self.get_song = AsyncMock()  # type: ignore[method-assign]
        self.get_playlist = AsyncMock()  # type: ignore[method-assign]
        self.search = AsyncMock()  # type: ignore[method-assign]
        self.close = AsyncMock()  # type: ignore[method-assign]

    @property
    def name(self) -> str:
        return "netease"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        netease=NeteaseSettings(_env_file=None, playlist_retry_limit=2),
        observability=ObservabilitySettings(_env_file=None),
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def app(test_settings: Settings, fake_provider: FakeProvider) -> FastAPI:
    registry = ProviderRegistry()
    registry.register(fake_provider)
    return create_app(settings=test_settings, registry=registry)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Client without lifespan, redirects are returned as is."""
    return TestClient(app, follow_redirects=False)
