"""Music provider implementations."""

from neometing.infrastructure.providers.netease_provider import NeteaseProvider
from neometing.infrastructure.providers.registry import ProviderRegistry

__all__ = ["NeteaseProvider", "ProviderRegistry"]
