"""Credential infrastructure providers (non-mockable).

Hashing and signing are local and deterministic enough to use the real
implementations everywhere, tests included.
"""

from dishka import Scope, provide

from ident.adapter.crypto import Argon2PasswordHasher, JWTTokenService
from ident.config import Settings
from ident.domain.service import PasswordHasher, TokenService
from ident.util.di.base import ProviderBase


class ProdCryptoProvider(ProviderBase):
    """Password hasher and token service provider."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_password_hasher(self) -> PasswordHasher:
        """Provide Argon2id password hasher."""
        return Argon2PasswordHasher()

    @provide(scope=Scope.APP)
    def get_token_service(self, settings: Settings) -> TokenService:
        """Provide JWT token service.

        Raises:
            ConfigurationError: If no signing key is configured in production
        """
        return JWTTokenService.from_settings(settings)
