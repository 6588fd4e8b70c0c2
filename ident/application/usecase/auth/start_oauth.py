"""Start OAuth authorization use case."""

from datetime import timedelta

import logfire
from pydantic import (
    AnyHttpUrl,
    BaseModel,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from ident.application.usecase.base import BaseUseCase
from ident.domain.model import OAuthStateRecord
from ident.domain.repository import OAuthStateStore
from ident.domain.service import OAuthAuthorizationRequest, OAuthProviderRegistry
from ident.domain.service.pkce import (
    CODE_VERIFIER_BYTES,
    NONCE_BYTES,
    STATE_BYTES,
    code_challenge_s256,
    generate_token,
)
from ident.util.clock import Clock, RandomBytes, system_random_bytes, utc_now

DEFAULT_STATE_TTL = timedelta(minutes=10)

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class StartOAuthRequest(BaseModel):
    """Start OAuth request."""

    provider: str  # Provider code, any case
    redirect_uri: str  # Callback URL registered with the provider
    nonce: bool = False  # Whether to bind an OIDC nonce

    @field_validator("redirect_uri")
    @classmethod
    def validate_redirect_uri(cls, v: str) -> str:
        """Require an absolute http(s) URL, kept exactly as given."""
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError:
            raise ValueError("redirect_uri must be a valid url") from None
        return v


class StartOAuthResponse(BaseModel):
    """Start OAuth response."""

    authorization_url: str


class StartOAuthUseCase(BaseUseCase):
    """Use case for beginning an Authorization Code + PKCE flow."""

    def __init__(
        self,
        oauth_registry: OAuthProviderRegistry,
        state_store: OAuthStateStore,
        state_ttl: timedelta = DEFAULT_STATE_TTL,
        clock: Clock = utc_now,
        random_bytes: RandomBytes = system_random_bytes,
    ) -> None:
        """Initialize start OAuth use case.

        Args:
            oauth_registry: Configured provider adapters
            state_store: OAuth state store
            state_ttl: Lifetime of the state record
            clock: Time source
            random_bytes: Entropy source for state, verifier and nonce
        """
        self.oauth_registry = oauth_registry
        self.state_store = state_store
        self.state_ttl = state_ttl
        self.clock = clock
        self.random_bytes = random_bytes

    async def execute(self, request: StartOAuthRequest) -> StartOAuthResponse:
        """Generate the handshake secrets, store them and build the URL.

        Raises:
            ProviderNotConfiguredError: If the provider has no adapter
        """
        adapter = self.oauth_registry.get(request.provider)

        with logfire.span("start_oauth", provider=adapter.provider.value):
            state = generate_token(self.random_bytes, STATE_BYTES)
            code_verifier = generate_token(self.random_bytes, CODE_VERIFIER_BYTES)
            nonce = (
                generate_token(self.random_bytes, NONCE_BYTES)
                if request.nonce
                else None
            )

            authorization_url = adapter.build_authorization_url(
                OAuthAuthorizationRequest(
                    redirect_uri=request.redirect_uri,
                    state=state,
                    code_challenge=code_challenge_s256(code_verifier),
                    nonce=nonce,
                )
            )

            now = self.clock()
            # Abandoned attempts are cleared as new ones start
            purged = await self.state_store.purge_expired(now)
            if purged:
                logfire.info("Expired OAuth states purged", count=purged)

            await self.state_store.save(
                OAuthStateRecord(
                    state=state,
                    provider=adapter.provider,
                    code_verifier=code_verifier,
                    nonce=nonce,
                    redirect_uri=request.redirect_uri,
                    created_at=now,
                    expires_at=now + self.state_ttl,
                )
            )

            logfire.info(
                "OAuth authorization started",
                provider=adapter.provider.value,
                expires_at=(now + self.state_ttl).isoformat(),
            )
            return StartOAuthResponse(authorization_url=authorization_url)
