"""Application lifecycle management for startup and shutdown tasks."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from neometing.config import Settings, get_settings
from neometing.infrastructure.integrations.netease_client import NeteaseClient
from neometing.infrastructure.observability import configure_logging
from neometing.infrastructure.providers import NeteaseProvider, ProviderRegistry

logger = logging.getLogger(__name__)


def build_registry(settings: Settings) -> ProviderRegistry:
    """Create every provider with its own client and permit pool."""
    registry = ProviderRegistry()
    registry.register(NeteaseProvider(NeteaseClient(settings.netease)))
    return registry


# Listen future me, everything before `yield` runs at STARTUP, everything after at
# SHUTDOWN. create_app() may already have put a registry on app.state (tests do);
# then we use it as is and still close it at the end. A registry we built ourselves
# is dropped after closing, so the next startup builds fresh clients instead of
# reusing closed ones.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles:
    - Logging configuration
    - Provider registry creation
    - Closing provider HTTP clients
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    built_registry = getattr(app.state, "registry", None) is None
    if built_registry:
        app.state.registry = build_registry(settings)
    logger.info("Providers ready: %s", ", ".join(app.state.registry.names()))

    try:
        yield
    finally:
        logger.info("Shutting down application...")
        await app.state.registry.close()
        if built_registry:
            app.state.registry = None
        logger.info("Provider clients closed")
