"""OAuth infrastructure providers."""

import logfire
from dishka import Scope, provide

from ident.adapter.github import RealGitHubOAuthProvider
from ident.adapter.google import RealGoogleOAuthProvider
from ident.config import OAuthSettings
from ident.domain.service import OAuthProvider, OAuthProviderRegistry
from ident.util.di.base import ProviderBase


class OAuthClientsProvider(ProviderBase):
    """OAuth component base."""

    __mock_component__ = "oauth"


class ProdOAuthClientsProvider(OAuthClientsProvider):
    """Production OAuth provider registry.

    A provider is registered only when both its client id and secret are
    configured; requests for any other provider fail as not configured.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_oauth_registry(
        self, oauth_settings: OAuthSettings
    ) -> OAuthProviderRegistry:
        """Provide the registry of configured OAuth clients."""
        clients: list[OAuthProvider] = []
        if oauth_settings.google.is_configured:
            clients.append(
                RealGoogleOAuthProvider.from_settings(oauth_settings.google)
            )
        if oauth_settings.github.is_configured:
            clients.append(
                RealGitHubOAuthProvider.from_settings(oauth_settings.github)
            )

        registry = OAuthProviderRegistry(clients)
        logfire.info(
            "OAuth providers registered",
            providers=[provider.value for provider in registry.configured],
        )
        return registry
