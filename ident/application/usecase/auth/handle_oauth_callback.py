"""Handle OAuth callback use case."""

from enum import Enum

import logfire
from pydantic import BaseModel

from ident.application.usecase.base import BaseUseCase
from ident.domain.error import OAuthProfileEmailRequiredError, OAuthStateExpiredError
from ident.domain.model import OAuthStateRecord, User
from ident.domain.repository import OAuthStateStore
from ident.domain.service import (
    OAuthProfile,
    OAuthProfileRequest,
    OAuthProviderRegistry,
    TokenPayload,
    TokenService,
    UserService,
)
from ident.domain.value import NAME_MAX_LENGTH, Name, Provider, new_user_id
from ident.util.clock import Clock, utc_now

from .common import AccessTokenInfo, AuthenticatedUser, AuthResponse


class CallbackStage(str, Enum):
    """Progress of one callback; every stage either advances or fails."""

    AWAITING_CONSUME = "awaiting_consume"
    VALIDATED = "validated"
    PROFILE_FETCHED = "profile_fetched"
    RECONCILED = "reconciled"
    ISSUED = "issued"


class HandleOAuthCallbackRequest(BaseModel):
    """OAuth callback parameters from the provider redirect."""

    provider: str
    code: str
    state: str


class HandleOAuthCallbackUseCase(BaseUseCase):
    """Use case for completing an OAuth login.

    The state record is consumed before anything else is checked, so a
    state value gets past the first step at most once, whatever happens
    afterwards.
    """

    def __init__(
        self,
        oauth_registry: OAuthProviderRegistry,
        state_store: OAuthStateStore,
        user_service: UserService,
        token_service: TokenService,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize OAuth callback use case.

        Args:
            oauth_registry: Configured provider adapters
            state_store: OAuth state store
            user_service: User domain service
            token_service: Token issuance port
            clock: Time source
        """
        self.oauth_registry = oauth_registry
        self.state_store = state_store
        self.user_service = user_service
        self.token_service = token_service
        self.clock = clock

    async def execute(self, request: HandleOAuthCallbackRequest) -> AuthResponse:
        """Consume the state, fetch the profile, reconcile and issue a token.

        Raises:
            OAuthStateExpiredError: If the state is unknown, consumed,
                for another provider, or expired
            ProviderNotConfiguredError: If the provider has no adapter
            OAuthProfileEmailRequiredError: If a new identity has no email
            AccountAlreadyLinkedError: If a concurrent link won the race
            ProviderError: If the provider exchange fails
        """
        with logfire.span("handle_oauth_callback", provider=request.provider) as span:
            stage = CallbackStage.AWAITING_CONSUME
            span.set_attribute("stage", stage.value)

            record = await self.state_store.consume(request.state)
            if record is None:
                logfire.warn("OAuth state not found", provider=request.provider)
                raise OAuthStateExpiredError()

            self._validate(record, request.provider)
            stage = CallbackStage.VALIDATED
            span.set_attribute("stage", stage.value)

            adapter = self.oauth_registry.get(record.provider)
            profile = await adapter.get_profile(
                OAuthProfileRequest(
                    code=request.code,
                    code_verifier=record.code_verifier,
                    redirect_uri=record.redirect_uri,
                )
            )
            stage = CallbackStage.PROFILE_FETCHED
            span.set_attribute("stage", stage.value)

            user = await self._reconcile(profile)
            stage = CallbackStage.RECONCILED
            span.set_attribute("stage", stage.value)

            access_token = self.token_service.sign_access_token(
                TokenPayload.for_user(user)
            )
            stage = CallbackStage.ISSUED
            span.set_attribute("stage", stage.value)

            logfire.info(
                "OAuth login completed",
                provider=record.provider.value,
                user_id=str(user.id),
            )
            return AuthResponse(
                user=AuthenticatedUser.from_user(user),
                access_token=AccessTokenInfo.from_token(access_token),
            )

    def _validate(self, record: OAuthStateRecord, provider: str) -> None:
        """Check the consumed record against the callback.

        Raises:
            OAuthStateExpiredError: On provider mismatch or expiry
        """
        try:
            requested = Provider(provider)
        except ValueError:
            requested = None

        if requested != record.provider:
            logfire.warn(
                "OAuth state provider mismatch",
                expected=record.provider.value,
                received=provider,
            )
            raise OAuthStateExpiredError()

        if record.is_expired(self.clock()):
            logfire.warn("OAuth state expired", provider=record.provider.value)
            raise OAuthStateExpiredError()

    async def _reconcile(self, profile: OAuthProfile) -> User:
        """Resolve the profile to a user, linking or creating as needed.

        Order:
        1. An account already linked to this identity wins, with no writes
        2. Otherwise an email is required
        3. A user with that email gets the account linked
        4. Otherwise a new federated user is created with this one account
        """
        linked = await self.user_service.find_by_account(
            profile.provider, profile.provider_user_id
        )
        if linked is not None:
            logfire.info("OAuth identity already linked", user_id=str(linked.user.id))
            return linked.user

        if profile.email is None:
            raise OAuthProfileEmailRequiredError(profile.provider.value)

        user = await self.user_service.find_by_email(profile.email)
        if user is not None:
            account = user.link_account(
                profile.provider, profile.provider_user_id, profile.email
            )
            await self.user_service.link_account(user, account)
            return user

        user = User.create(
            user_id=new_user_id(),
            name=self._display_name(profile),
            email=profile.email,
        )
        user.link_account(profile.provider, profile.provider_user_id, profile.email)
        return await self.user_service.register(user)

    @staticmethod
    def _display_name(profile: OAuthProfile) -> Name:
        """Profile name, falling back to the email local part."""
        candidate = (profile.name or "").strip()
        if not candidate and profile.email is not None:
            candidate = profile.email.local_part
        return Name(candidate[:NAME_MAX_LENGTH])
