"""Application layer DI providers."""

from datetime import timedelta

from dishka import Scope, provide

from ident.application.usecase.auth import (
    GetMeUseCase,
    HandleOAuthCallbackUseCase,
    LoginLocalUseCase,
    LogoutUseCase,
    RegisterLocalUserUseCase,
    StartOAuthUseCase,
)
from ident.config import OAuthSettings
from ident.domain.repository import OAuthStateStore
from ident.domain.service import (
    OAuthProviderRegistry,
    PasswordHasher,
    TokenService,
    UserService,
)
from ident.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Local credential use cases
    @provide(scope=Scope.REQUEST)
    def get_register_local_user_use_case(
        self,
        user_service: UserService,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> RegisterLocalUserUseCase:
        """Provide register local user use case."""
        return RegisterLocalUserUseCase(
            user_service=user_service,
            password_hasher=password_hasher,
            token_service=token_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_local_use_case(
        self,
        user_service: UserService,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ) -> LoginLocalUseCase:
        """Provide login local use case."""
        return LoginLocalUseCase(
            user_service=user_service,
            password_hasher=password_hasher,
            token_service=token_service,
        )

    # OAuth use cases
    @provide(scope=Scope.REQUEST)
    def get_start_oauth_use_case(
        self,
        oauth_registry: OAuthProviderRegistry,
        state_store: OAuthStateStore,
        oauth_settings: OAuthSettings,
    ) -> StartOAuthUseCase:
        """Provide start OAuth use case."""
        return StartOAuthUseCase(
            oauth_registry=oauth_registry,
            state_store=state_store,
            state_ttl=timedelta(seconds=oauth_settings.state_ttl_seconds),
        )

    @provide(scope=Scope.REQUEST)
    def get_handle_oauth_callback_use_case(
        self,
        oauth_registry: OAuthProviderRegistry,
        state_store: OAuthStateStore,
        user_service: UserService,
        token_service: TokenService,
    ) -> HandleOAuthCallbackUseCase:
        """Provide handle OAuth callback use case."""
        return HandleOAuthCallbackUseCase(
            oauth_registry=oauth_registry,
            state_store=state_store,
            user_service=user_service,
            token_service=token_service,
        )

    # Session use cases
    @provide(scope=Scope.REQUEST)
    def get_get_me_use_case(self, user_service: UserService) -> GetMeUseCase:
        """Provide get me use case."""
        return GetMeUseCase(user_service=user_service)

    @provide(scope=Scope.REQUEST)
    def get_logout_use_case(self) -> LogoutUseCase:
        """Provide logout use case."""
        return LogoutUseCase()
