"""Unit tests for the GitHub OAuth client."""

from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import parse_qs, urlparse

import pytest

from ident.adapter.error import ProviderError
from ident.adapter.github import RealGitHubOAuthProvider
from ident.domain.service import OAuthAuthorizationRequest, OAuthProfileRequest
from ident.domain.value import Email, Provider


@pytest.fixture
def github() -> RealGitHubOAuthProvider:
    return RealGitHubOAuthProvider(client_id="gh-client", client_secret="secret")


@pytest.fixture
def profile_request() -> OAuthProfileRequest:
    return OAuthProfileRequest(
        code="auth-code", code_verifier="verifier", redirect_uri="https://app/cb"
    )


def test_authorization_url(github):
    url = github.build_authorization_url(
        OAuthAuthorizationRequest(
            redirect_uri="https://app/cb", state="state-1", code_challenge="ch"
        )
    )

    params = parse_qs(urlparse(url).query)
    assert url.startswith("https://github.com/login/oauth/authorize?")
    assert params["client_id"] == ["gh-client"]
    assert params["state"] == ["state-1"]
    assert params["code_challenge_method"] == ["S256"]


class TestGetProfile:
    """Tests for profile retrieval."""

    @pytest.mark.asyncio
    async def test_public_email_used_directly(self, github, profile_request):
        get_json = AsyncMock(
            return_value={"id": 4242, "login": "octocat", "email": "Octo@GitHub.com"}
        )
        with (
            patch.object(
                github, "_exchange_code_for_token", AsyncMock(return_value="tok")
            ),
            patch.object(github, "_get_json", get_json),
        ):
            profile = await github.get_profile(profile_request)

        assert profile.provider == Provider.GITHUB
        assert profile.provider_user_id.root == "4242"
        assert profile.email == Email("octo@github.com")
        assert profile.name == "octocat"
        assert get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_private_email_uses_primary_verified(self, github, profile_request):
        get_json = AsyncMock(
            side_effect=[
                {"id": 1, "login": "octocat", "name": "The Octocat", "email": None},
                [
                    {"email": "old@example.com", "verified": True, "primary": False},
                    {"email": "main@example.com", "verified": True, "primary": True},
                    {"email": "spam@example.com", "verified": False, "primary": False},
                ],
            ]
        )
        with (
            patch.object(
                github, "_exchange_code_for_token", AsyncMock(return_value="tok")
            ),
            patch.object(github, "_get_json", get_json),
        ):
            profile = await github.get_profile(profile_request)

        assert profile.email == Email("main@example.com")
        assert profile.name == "The Octocat"

    @pytest.mark.asyncio
    async def test_no_verified_email(self, github, profile_request):
        get_json = AsyncMock(
            side_effect=[
                {"id": 1, "login": "octocat", "email": None},
                [{"email": "x@example.com", "verified": False, "primary": True}],
            ]
        )
        with (
            patch.object(
                github, "_exchange_code_for_token", AsyncMock(return_value="tok")
            ),
            patch.object(github, "_get_json", get_json),
        ):
            profile = await github.get_profile(profile_request)

        assert profile.email is None
        assert profile.email_verified is False

    @pytest.mark.asyncio
    async def test_error_field_in_token_response_raises(self, github, profile_request):
        """GitHub reports bad codes with HTTP 200 and an error field."""
        client = MagicMock()
        client.post = AsyncMock(
            return_value=MagicMock(
                status_code=200,
                json=MagicMock(return_value={"error": "bad_verification_code"}),
            )
        )

        with pytest.raises(ProviderError) as exc_info:
            await github._exchange_code_for_token(client, profile_request)

        assert exc_info.value.provider == "github"
