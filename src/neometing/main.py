"""FastAPI application factory and server entry point."""

import uvicorn
from fastapi import FastAPI

from neometing import __version__
from neometing.api.exception_handlers import register_exception_handlers
from neometing.api.routers import health, meting
from neometing.config import Settings, get_settings
from neometing.infrastructure.lifecycle import lifespan
from neometing.infrastructure.observability import RequestLoggingMiddleware
from neometing.infrastructure.providers import ProviderRegistry


def create_app(
    settings: Settings | None = None,
    registry: ProviderRegistry | None = None,
) -> FastAPI:
    """Create the application.

    Args:
        settings: Settings to use instead of the environment
        registry: Pre-built provider registry; built at startup when omitted
    """
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry

    app.add_middleware(
        RequestLoggingMiddleware,
        log_query_params=settings.observability.log_query_params,
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(meting.router)
    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
