"""API routers."""

from neometing.api.routers import health, meting

__all__ = ["health", "meting"]
