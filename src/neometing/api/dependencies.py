"""Dependency injection for API endpoints."""

import logging
from typing import cast

from fastapi import HTTPException, Request

from neometing.config import Settings, get_settings
from neometing.domain.dtos import SongLinks
from neometing.domain.ports import IMusicProvider
from neometing.infrastructure.providers import ProviderRegistry

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (falls back to the environment)."""
    settings = getattr(request.app.state, "settings", None)
    return cast(Settings, settings) if settings is not None else get_settings()


def get_registry(request: Request) -> ProviderRegistry:
    """Get the provider registry from app state.

    Raises:
        HTTPException: 503 if the registry is not initialized
    """
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Providers not initialized")
    return cast(ProviderRegistry, registry)


def get_provider(provider: str, request: Request) -> IMusicProvider:
    """Resolve the ``{provider}`` path segment.

    Raises:
        HTTPException: 404 for unknown providers
    """
    found = get_registry(request).get(provider)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider}")
    return found


# Hey future me - this is where provider-internal ids become callable URLs! The provider
# never sees routes, it just calls these three functions with a track id. The base URL
# comes from the inbound request so links work behind whatever host the client used.
def get_song_links(provider: str, request: Request) -> SongLinks:
    """Build link functions pointing back at this server's pic/lrc/url routes."""
    base = str(request.base_url).rstrip("/")

    def link(kind: str):  # type: ignore[no-untyped-def]
        return lambda id: f"{base}/{provider}/{kind}/{id}"

    return SongLinks(pic=link("pic"), lrc=link("lrc"), url=link("url"))
