"""Access token port and payload."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ident.domain.model.user import User
from ident.domain.value import Provider


class ProviderAccount(BaseModel):
    """One credential entry in a token's ``providerAccounts`` claim."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    provider: str
    provider_user_id: str = Field(alias="providerUserId")


class TokenPayload(BaseModel):
    """Identity claims carried by an access token.

    Dump with ``by_alias=True`` to get the wire claim names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sub: str
    email: str
    name: str | None = None
    provider_accounts: list[ProviderAccount] = Field(
        default_factory=list, alias="providerAccounts"
    )

    @classmethod
    def for_user(cls, user: User) -> "TokenPayload":
        """Build claims from the user's current state.

        Users with a password get a synthetic local entry keyed by their
        own id, after their linked accounts.
        """
        accounts = [
            ProviderAccount(
                provider=account.provider.value,
                provider_user_id=account.provider_user_id.root,
            )
            for account in user.accounts
        ]
        if user.has_password:
            accounts.append(
                ProviderAccount(
                    provider=Provider.LOCAL.value, provider_user_id=str(user.id)
                )
            )

        return cls(
            sub=str(user.id),
            email=user.email.root,
            name=user.name.root,
            provider_accounts=accounts,
        )


class AccessToken(BaseModel):
    """A signed bearer credential."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)
    expires_at: datetime


class TokenService(ABC):
    """Signs and verifies access tokens and publishes verification keys."""

    @abstractmethod
    def sign_access_token(self, payload: TokenPayload) -> AccessToken:
        """Sign a short-lived access token for the given claims."""
        pass

    @abstractmethod
    def verify(self, token: str) -> TokenPayload:
        """Verify a token and return its claims.

        Raises:
            InvalidTokenError: On a bad signature, wrong issuer or audience,
                expiry, or malformed claims
        """
        pass

    @abstractmethod
    def get_public_jwks(self) -> dict[str, Any]:
        """Public keys as a JWK set, ``{"keys": [...]}``."""
        pass
