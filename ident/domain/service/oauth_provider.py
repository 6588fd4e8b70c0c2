"""OAuth provider port."""

from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ident.domain.value import Email, Provider, ProviderUserId


class OAuthAuthorizationRequest(BaseModel):
    """Parameters for building a provider authorization URL."""

    model_config = ConfigDict(frozen=True)

    redirect_uri: str
    state: str
    code_challenge: str
    code_challenge_method: Literal["S256"] = "S256"
    nonce: str | None = None


class OAuthProfileRequest(BaseModel):
    """Parameters for exchanging a code and fetching the profile."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(repr=False)
    code_verifier: str = Field(repr=False)
    redirect_uri: str


class OAuthProfile(BaseModel):
    """Normalized identity returned by a provider."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    provider_user_id: ProviderUserId
    email: Email | None = None
    email_verified: bool | None = None
    name: str | None = None


class OAuthProvider(ABC):
    """OAuth Authorization Code + PKCE client for one provider."""

    provider: Provider

    @abstractmethod
    def build_authorization_url(self, request: OAuthAuthorizationRequest) -> str:
        """Build the URL to redirect the user agent to."""
        pass

    @abstractmethod
    async def get_profile(self, request: OAuthProfileRequest) -> OAuthProfile:
        """Exchange the code (with its verifier) and fetch the user profile.

        Raises:
            ProviderError: If the provider rejects the exchange or is unreachable
        """
        pass
