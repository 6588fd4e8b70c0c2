"""Unit tests for OAuthProviderRegistry."""

import pytest

from ident.adapter.github import MockGitHubOAuthProvider
from ident.adapter.google import MockGoogleOAuthProvider
from ident.domain.error import ProviderNotConfiguredError
from ident.domain.service import OAuthProviderRegistry
from ident.domain.value import Provider


class TestOAuthProviderRegistry:
    """Tests for provider lookup."""

    def test_get_registered_provider(self):
        google = MockGoogleOAuthProvider()
        registry = OAuthProviderRegistry([google])

        assert registry.get(Provider.GOOGLE) is google
        assert registry.get("Google") is google

    def test_unregistered_provider_is_not_configured(self):
        registry = OAuthProviderRegistry([MockGoogleOAuthProvider()])

        with pytest.raises(ProviderNotConfiguredError) as exc_info:
            registry.get("github")

        assert exc_info.value.provider == "github"

    def test_unknown_code_is_not_configured(self):
        registry = OAuthProviderRegistry([MockGoogleOAuthProvider()])

        with pytest.raises(ProviderNotConfiguredError):
            registry.get("myspace")

    def test_local_has_no_adapter(self):
        registry = OAuthProviderRegistry(
            [MockGoogleOAuthProvider(), MockGitHubOAuthProvider()]
        )

        with pytest.raises(ProviderNotConfiguredError):
            registry.get(Provider.LOCAL)

    def test_configured_lists_registered_providers(self):
        registry = OAuthProviderRegistry(
            [MockGoogleOAuthProvider(), MockGitHubOAuthProvider()]
        )

        assert set(registry.configured) == {Provider.GOOGLE, Provider.GITHUB}
