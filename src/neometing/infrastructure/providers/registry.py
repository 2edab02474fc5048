"""Music provider registry.

Providers are registered at application startup and looked up by name
for every request.
"""

import logging

from neometing.domain.ports import IMusicProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry mapping provider names to provider instances."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._providers: dict[str, IMusicProvider] = {}

    def register(self, provider: IMusicProvider) -> None:
        """Register a provider under its name, replacing any previous one."""
        self._providers[provider.name] = provider
        logger.info("Registered music provider: %s", provider.name)

    def unregister(self, name: str) -> None:
        """Unregister a provider."""
        if name in self._providers:
            self._providers.pop(name)
            logger.info("Unregistered music provider: %s", name)

    def get(self, name: str) -> IMusicProvider | None:
        """Get a provider by name."""
        return self._providers.get(name)

    def names(self) -> list[str]:
        """Names of all registered providers, in registration order."""
        return list(self._providers)

    async def close(self) -> None:
        """Close every provider. Errors are logged, the rest still get closed."""
        for name, provider in self._providers.items():
            try:
                await provider.close()
            except Exception as e:
                logger.exception("Error closing provider %s: %s", name, e)
