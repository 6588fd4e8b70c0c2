"""OAuth provider registry."""

from collections.abc import Iterable

from ident.domain.error import ProviderNotConfiguredError
from ident.domain.service.base import Service
from ident.domain.service.oauth_provider import OAuthProvider
from ident.domain.value import Provider


class OAuthProviderRegistry(Service):
    """Resolves the adapter for a provider code.

    Only providers with credentials configured are registered, so lookup
    doubles as the "is this provider enabled" check.
    """

    def __init__(self, providers: Iterable[OAuthProvider]) -> None:
        """Initialize registry.

        Args:
            providers: Configured provider adapters
        """
        self.providers: dict[Provider, OAuthProvider] = {
            adapter.provider: adapter for adapter in providers
        }

    def get(self, provider: Provider | str) -> OAuthProvider:
        """Get the adapter for a provider.

        Args:
            provider: Provider enum or code string (any case)

        Returns:
            The registered adapter

        Raises:
            ProviderNotConfiguredError: If the code is unknown or has no adapter
        """
        try:
            key = Provider(provider)
        except ValueError:
            raise ProviderNotConfiguredError(str(provider)) from None

        adapter = self.providers.get(key)
        if adapter is None:
            raise ProviderNotConfiguredError(key.value)
        return adapter

    @property
    def configured(self) -> list[Provider]:
        """Providers with a registered adapter."""
        return list(self.providers)
