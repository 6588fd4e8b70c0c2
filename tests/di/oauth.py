"""Mock OAuth providers for testing."""

from dishka import Scope, provide

from ident.adapter.github import MockGitHubOAuthProvider
from ident.adapter.google import MockGoogleOAuthProvider
from ident.domain.service import OAuthProviderRegistry
from ident.util.di.infrastructure.oauth import OAuthClientsProvider


class MockOAuthClientsProvider(OAuthClientsProvider):
    """Mock OAuth provider registry with Google and GitHub registered.

    The mock clients are exposed so tests can swap the returned profile.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_mock_google(self) -> MockGoogleOAuthProvider:
        """Provide mock Google OAuth client."""
        return MockGoogleOAuthProvider()

    @provide(scope=Scope.APP)
    def get_mock_github(self) -> MockGitHubOAuthProvider:
        """Provide mock GitHub OAuth client."""
        return MockGitHubOAuthProvider()

    @provide(scope=Scope.APP)
    def get_oauth_registry(
        self, google: MockGoogleOAuthProvider, github: MockGitHubOAuthProvider
    ) -> OAuthProviderRegistry:
        """Provide registry of mock OAuth clients."""
        return OAuthProviderRegistry([google, github])
