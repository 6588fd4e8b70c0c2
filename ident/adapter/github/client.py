"""GitHub OAuth 2.0 client.

GitHub returns a JSON token response when asked to, and only includes the
user's email in ``/user`` when it is public, so the primary verified
address is looked up separately.
"""

from urllib.parse import urlencode

import httpx
import logfire

from ident.adapter.error import ProviderError
from ident.config import OAuthClientSettings
from ident.domain.service import (
    OAuthAuthorizationRequest,
    OAuthProfile,
    OAuthProfileRequest,
    OAuthProvider,
)
from ident.domain.value import Provider

DEFAULT_AUTHORIZATION_ENDPOINT = "https://github.com/login/oauth/authorize"
DEFAULT_TOKEN_ENDPOINT = "https://github.com/login/oauth/access_token"
DEFAULT_USER_ENDPOINT = "https://api.github.com/user"
DEFAULT_EMAILS_ENDPOINT = "https://api.github.com/user/emails"
DEFAULT_SCOPE = "read:user user:email"

GITHUB_ACCEPT = "application/vnd.github+json"


class GitHubOAuthProvider(OAuthProvider):
    """Base class for GitHub OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = Provider.GITHUB


class RealGitHubOAuthProvider(GitHubOAuthProvider):
    """GitHub OAuth client talking to GitHub's endpoints."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        authorization_endpoint: str = DEFAULT_AUTHORIZATION_ENDPOINT,
        token_endpoint: str = DEFAULT_TOKEN_ENDPOINT,
        user_endpoint: str = DEFAULT_USER_ENDPOINT,
        emails_endpoint: str = DEFAULT_EMAILS_ENDPOINT,
        scope: str = DEFAULT_SCOPE,
        timeout: float = 30.0,
    ) -> None:
        """Initialize GitHub OAuth client.

        Args:
            client_id: GitHub OAuth app client ID
            client_secret: GitHub OAuth app client secret
            authorization_endpoint: Authorization endpoint override
            token_endpoint: Token endpoint override
            user_endpoint: User endpoint override
            emails_endpoint: Emails endpoint override
            scope: Requested scopes
            timeout: Timeout for each outbound request, in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_endpoint = authorization_endpoint
        self.token_endpoint = token_endpoint
        self.user_endpoint = user_endpoint
        self.emails_endpoint = emails_endpoint
        self.scope = scope
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: OAuthClientSettings) -> "RealGitHubOAuthProvider":
        """Build a client from provider settings, keeping defaults for unset fields."""
        overrides = {
            "authorization_endpoint": settings.authorization_endpoint,
            "token_endpoint": settings.token_endpoint,
            "user_endpoint": settings.userinfo_endpoint,
            "emails_endpoint": settings.emails_endpoint,
            "scope": settings.scope,
        }
        return cls(
            client_id=settings.client_id or "",
            client_secret=settings.client_secret or "",
            **{key: value for key, value in overrides.items() if value},
        )

    def build_authorization_url(self, request: OAuthAuthorizationRequest) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": request.redirect_uri,
            "scope": self.scope,
            "state": request.state,
            "code_challenge": request.code_challenge,
            "code_challenge_method": request.code_challenge_method,
        }
        return f"{self.authorization_endpoint}?{urlencode(params)}"

    async def get_profile(self, request: OAuthProfileRequest) -> OAuthProfile:
        with logfire.span("github.get_profile"):
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                access_token = await self._exchange_code_for_token(client, request)
                user = await self._get_json(
                    client, self.user_endpoint, access_token, "user profile"
                )
                email = user.get("email") or await self._get_primary_email(
                    client, access_token
                )

            if user.get("id") is None:
                raise ProviderError("github", "GitHub user profile missing id")

            logfire.info("GitHub OAuth completed", provider_user_id=str(user["id"]))
            return OAuthProfile(
                provider=Provider.GITHUB,
                provider_user_id=str(user["id"]),
                email=email,
                email_verified=email is not None,
                name=user.get("name") or user.get("login") or email,
            )

    async def _exchange_code_for_token(
        self, client: httpx.AsyncClient, request: OAuthProfileRequest
    ) -> str:
        """Exchange authorization code for access token.

        Raises:
            ProviderError: If token exchange fails
        """
        body = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": request.code,
            "redirect_uri": request.redirect_uri,
            "code_verifier": request.code_verifier,
        }

        try:
            response = await client.post(
                self.token_endpoint,
                json=body,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logfire.error("GitHub token exchange HTTP error", error=str(e))
            raise ProviderError("github", f"HTTP error during token exchange: {e}")

        if response.status_code != 200:
            logfire.error(
                "GitHub token exchange failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError(
                "github", "Failed to exchange authorization code with GitHub"
            )

        # GitHub reports bad codes with 200 and an "error" field
        access_token = response.json().get("access_token")
        if not access_token:
            raise ProviderError("github", "GitHub token response missing access_token")
        return access_token

    async def _get_primary_email(
        self, client: httpx.AsyncClient, access_token: str
    ) -> str | None:
        """Pick the primary verified email, else any verified one."""
        emails = await self._get_json(
            client, self.emails_endpoint, access_token, "email addresses"
        )
        verified = [entry for entry in emails if entry.get("verified")]
        primary = next((entry for entry in verified if entry.get("primary")), None)
        chosen = primary or (verified[0] if verified else None)
        return chosen["email"] if chosen else None

    async def _get_json(
        self, client: httpx.AsyncClient, url: str, access_token: str, what: str
    ):
        """GET a GitHub API resource.

        Raises:
            ProviderError: If the request fails
        """
        try:
            response = await client.get(
                url,
                headers={
                    "Accept": GITHUB_ACCEPT,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            logfire.error("GitHub API HTTP error", url=url, error=str(e))
            raise ProviderError("github", f"HTTP error fetching {what}: {e}")

        if response.status_code != 200:
            logfire.error(
                "GitHub API request failed",
                url=url,
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError("github", f"Failed to fetch GitHub {what}")

        return response.json()


class MockGitHubOAuthProvider(GitHubOAuthProvider):
    """Mock GitHub OAuth client for testing.

    Returns a deterministic profile without making real API calls. Tests
    may replace ``profile`` to simulate other identities.
    """

    def __init__(self, profile: OAuthProfile | None = None) -> None:
        self.profile = profile or OAuthProfile(
            provider=Provider.GITHUB,
            provider_user_id="4242",
            email="mock@github.com",
            email_verified=True,
            name="mockuser",
        )
        self.profile_requests: list[OAuthProfileRequest] = []

    def build_authorization_url(self, request: OAuthAuthorizationRequest) -> str:
        params = {
            "state": request.state,
            "code_challenge": request.code_challenge,
            "redirect_uri": request.redirect_uri,
            "mock": "true",
        }
        return f"{DEFAULT_AUTHORIZATION_ENDPOINT}?{urlencode(params)}"

    async def get_profile(self, request: OAuthProfileRequest) -> OAuthProfile:
        self.profile_requests.append(request)
        return self.profile
