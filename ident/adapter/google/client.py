"""Google OAuth 2.0 / OpenID Connect client.

Authorization Code flow with PKCE; the profile comes from the OIDC
userinfo endpoint.
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

DEFAULT_AUTHORIZATION_ENDPOINT = "https://accounts.google.com/o/oauth2/v2/auth"
DEFAULT_TOKEN_ENDPOINT = "https://oauth2.googleapis.com/token"
DEFAULT_USERINFO_ENDPOINT = "https://openidconnect.googleapis.com/v1/userinfo"
DEFAULT_SCOPE = "openid email profile"


class GoogleOAuthProvider(OAuthProvider):
    """Base class for Google OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = Provider.GOOGLE


class RealGoogleOAuthProvider(GoogleOAuthProvider):
    """Google OAuth client talking to Google's endpoints."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        authorization_endpoint: str = DEFAULT_AUTHORIZATION_ENDPOINT,
        token_endpoint: str = DEFAULT_TOKEN_ENDPOINT,
        userinfo_endpoint: str = DEFAULT_USERINFO_ENDPOINT,
        scope: str = DEFAULT_SCOPE,
        timeout: float = 30.0,
    ) -> None:
        """Initialize Google OAuth client.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            authorization_endpoint: Authorization endpoint override
            token_endpoint: Token endpoint override
            userinfo_endpoint: Userinfo endpoint override
            scope: Requested scopes
            timeout: Timeout for each outbound request, in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_endpoint = authorization_endpoint
        self.token_endpoint = token_endpoint
        self.userinfo_endpoint = userinfo_endpoint
        self.scope = scope
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: OAuthClientSettings) -> "RealGoogleOAuthProvider":
        """Build a client from provider settings, keeping defaults for unset fields."""
        overrides = {
            "authorization_endpoint": settings.authorization_endpoint,
            "token_endpoint": settings.token_endpoint,
            "userinfo_endpoint": settings.userinfo_endpoint,
            "scope": settings.scope,
        }
        return cls(
            client_id=settings.client_id or "",
            client_secret=settings.client_secret or "",
            **{key: value for key, value in overrides.items() if value},
        )

    def build_authorization_url(self, request: OAuthAuthorizationRequest) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": request.redirect_uri,
            "scope": self.scope,
            "state": request.state,
            "code_challenge": request.code_challenge,
            "code_challenge_method": request.code_challenge_method,
            "access_type": "offline",
            "include_granted_scopes": "true",
            "prompt": "consent",
        }
        if request.nonce:
            params["nonce"] = request.nonce

        return f"{self.authorization_endpoint}?{urlencode(params)}"

    async def get_profile(self, request: OAuthProfileRequest) -> OAuthProfile:
        with logfire.span("google.get_profile"):
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                access_token = await self._exchange_code_for_token(client, request)
                user_info = await self._get_user_info(client, access_token)

            email_verified = user_info.get("email_verified")
            # Unverified addresses must not be used to match existing users
            email = user_info.get("email") if email_verified is not False else None

            logfire.info("Google OAuth completed", provider_user_id=user_info["sub"])
            return OAuthProfile(
                provider=Provider.GOOGLE,
                provider_user_id=str(user_info["sub"]),
                email=email,
                email_verified=email_verified,
                name=user_info.get("name") or email,
            )

    async def _exchange_code_for_token(
        self, client: httpx.AsyncClient, request: OAuthProfileRequest
    ) -> str:
        """Exchange authorization code for access token.

        Raises:
            ProviderError: If token exchange fails
        """
        data = {
            "code": request.code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": request.redirect_uri,
            "grant_type": "authorization_code",
            "code_verifier": request.code_verifier,
        }

        try:
            response = await client.post(
                self.token_endpoint,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except httpx.HTTPError as e:
            logfire.error("Google token exchange HTTP error", error=str(e))
            raise ProviderError("google", f"HTTP error during token exchange: {e}")

        if response.status_code != 200:
            logfire.error(
                "Google token exchange failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError(
                "google", "Failed to exchange authorization code with Google"
            )

        access_token = response.json().get("access_token")
        if not access_token:
            raise ProviderError("google", "Google token response missing access_token")
        return access_token

    async def _get_user_info(
        self, client: httpx.AsyncClient, access_token: str
    ) -> dict:
        """Get the OIDC userinfo document.

        Raises:
            ProviderError: If the request fails
        """
        try:
            response = await client.get(
                self.userinfo_endpoint,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logfire.error("Google userinfo HTTP error", error=str(e))
            raise ProviderError("google", f"HTTP error fetching user info: {e}")

        if response.status_code != 200:
            logfire.error(
                "Google userinfo request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError("google", "Failed to fetch Google user profile")

        user_info = response.json()
        if not user_info.get("sub"):
            raise ProviderError("google", "Google user profile missing sub")
        return user_info


class MockGoogleOAuthProvider(GoogleOAuthProvider):
    """Mock Google OAuth client for testing.

    Returns a deterministic profile without making real API calls. Tests
    may replace ``profile`` to simulate other identities.
    """

    def __init__(self, profile: OAuthProfile | None = None) -> None:
        self.profile = profile or OAuthProfile(
            provider=Provider.GOOGLE,
            provider_user_id="mockgoogle123",
            email="mock@gmail.com",
            email_verified=True,
            name="Mock Google User",
        )
        self.profile_requests: list[OAuthProfileRequest] = []

    def build_authorization_url(self, request: OAuthAuthorizationRequest) -> str:
        params = {
            "state": request.state,
            "code_challenge": request.code_challenge,
            "redirect_uri": request.redirect_uri,
            "mock": "true",
        }
        if request.nonce:
            params["nonce"] = request.nonce
        return f"{DEFAULT_AUTHORIZATION_ENDPOINT}?{urlencode(params)}"

    async def get_profile(self, request: OAuthProfileRequest) -> OAuthProfile:
        self.profile_requests.append(request)
        return self.profile
