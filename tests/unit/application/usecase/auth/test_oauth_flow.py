"""Unit tests for the OAuth start and callback use cases."""

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest
from pydantic import ValidationError

from ident.adapter.error import ProviderError
from ident.adapter.github import MockGitHubOAuthProvider
from ident.adapter.google import MockGoogleOAuthProvider
from ident.application.usecase.auth import (
    HandleOAuthCallbackRequest,
    HandleOAuthCallbackUseCase,
    StartOAuthRequest,
    StartOAuthUseCase,
)
from ident.domain.error import (
    AccountAlreadyLinkedError,
    OAuthProfileEmailRequiredError,
    OAuthStateExpiredError,
    ProviderNotConfiguredError,
)
from ident.domain.model import User
from ident.domain.service import (
    OAuthProfile,
    OAuthProviderRegistry,
    UserService,
)
from ident.domain.service.pkce import code_challenge_s256
from ident.domain.value import (
    Email,
    Name,
    PasswordHash,
    Provider,
    ProviderUserId,
    UserKind,
)
from ident.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryOAuthStateStore,
    InMemoryUserRepository,
)
from tests.fakes import FIXED_NOW

REDIRECT_URI = "https://app/cb"


@pytest.fixture
def google() -> MockGoogleOAuthProvider:
    return MockGoogleOAuthProvider(
        OAuthProfile(
            provider=Provider.GOOGLE,
            provider_user_id="g1",
            email="a@b.com",
            email_verified=True,
            name="A B",
        )
    )


@pytest.fixture
def github() -> MockGitHubOAuthProvider:
    return MockGitHubOAuthProvider()


@pytest.fixture
def registry(google, github) -> OAuthProviderRegistry:
    return OAuthProviderRegistry([google, github])


@pytest.fixture
def state_store() -> InMemoryOAuthStateStore:
    return InMemoryOAuthStateStore()


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def account_repo(user_repo) -> InMemoryAccountRepository:
    return InMemoryAccountRepository(user_repo)


@pytest.fixture
def user_service(user_repo, account_repo) -> UserService:
    return UserService(user_repo, account_repo)


@pytest.fixture
def start(registry, state_store, clock, random_bytes) -> StartOAuthUseCase:
    return StartOAuthUseCase(
        oauth_registry=registry,
        state_store=state_store,
        state_ttl=timedelta(minutes=10),
        clock=clock,
        random_bytes=random_bytes,
    )


@pytest.fixture
def callback(
    registry, state_store, user_service, token_service, clock
) -> HandleOAuthCallbackUseCase:
    return HandleOAuthCallbackUseCase(
        oauth_registry=registry,
        state_store=state_store,
        user_service=user_service,
        token_service=token_service,
        clock=clock,
    )


async def start_flow(start: StartOAuthUseCase, provider: str = "google") -> str:
    """Run the start step and return the state from the authorization URL."""
    response = await start.execute(
        StartOAuthRequest(provider=provider, redirect_uri=REDIRECT_URI)
    )
    return parse_qs(urlparse(response.authorization_url).query)["state"][0]


class TestStartOAuth:
    """Tests for StartOAuthUseCase."""

    @pytest.mark.asyncio
    async def test_saves_state_with_ttl(self, start, state_store):
        state = await start_flow(start)

        record = await state_store.get(state, FIXED_NOW)
        assert record is not None
        assert record.provider == Provider.GOOGLE
        assert record.redirect_uri == REDIRECT_URI
        assert record.created_at == FIXED_NOW
        assert record.expires_at == FIXED_NOW + timedelta(minutes=10)
        assert record.nonce is None

    @pytest.mark.asyncio
    async def test_secrets_have_fixed_lengths(self, start, state_store):
        state = await start_flow(start)

        record = await state_store.get(state, FIXED_NOW)
        # base64url without padding: 16 bytes -> 22 chars, 32 bytes -> 43 chars
        assert len(record.state) == 22
        assert len(record.code_verifier) == 43
        assert "=" not in record.state + record.code_verifier

    @pytest.mark.asyncio
    async def test_url_carries_s256_challenge_of_stored_verifier(
        self, start, state_store
    ):
        response = await start.execute(
            StartOAuthRequest(provider="google", redirect_uri=REDIRECT_URI)
        )

        params = parse_qs(urlparse(response.authorization_url).query)
        record = await state_store.get(params["state"][0], FIXED_NOW)
        assert params["code_challenge"] == [code_challenge_s256(record.code_verifier)]
        assert params["redirect_uri"] == [REDIRECT_URI]

    @pytest.mark.asyncio
    async def test_nonce_generated_on_request(self, start, state_store, random_bytes):
        response = await start.execute(
            StartOAuthRequest(provider="google", redirect_uri=REDIRECT_URI, nonce=True)
        )

        params = parse_qs(urlparse(response.authorization_url).query)
        record = await state_store.get(params["state"][0], FIXED_NOW)
        assert record.nonce is not None
        assert len(record.nonce) == 22
        assert params["nonce"] == [record.nonce]
        assert random_bytes.calls == 3

    @pytest.mark.asyncio
    async def test_provider_code_is_case_insensitive(self, start, state_store):
        state = await start_flow(start, provider="GitHub")

        assert (await state_store.get(state, FIXED_NOW)).provider == Provider.GITHUB

    @pytest.mark.asyncio
    async def test_starting_purges_expired_states(self, start, state_store, clock):
        stale = await start_flow(start)
        clock.advance(minutes=11)

        fresh = await start_flow(start)

        assert len(state_store) == 1
        assert await state_store.consume(stale) is None
        assert await state_store.consume(fresh) is not None

    @pytest.mark.asyncio
    async def test_unconfigured_provider_fails_without_state(
        self, state_store, clock, random_bytes
    ):
        start = StartOAuthUseCase(
            oauth_registry=OAuthProviderRegistry([MockGoogleOAuthProvider()]),
            state_store=state_store,
            clock=clock,
            random_bytes=random_bytes,
        )

        with pytest.raises(ProviderNotConfiguredError):
            await start.execute(
                StartOAuthRequest(provider="github", redirect_uri=REDIRECT_URI)
            )

        assert len(state_store) == 0

    @pytest.mark.parametrize(
        "redirect_uri", ["not a url", "/relative/cb", "ftp://app/cb"]
    )
    def test_redirect_uri_must_be_http_url(self, redirect_uri):
        with pytest.raises(ValidationError):
            StartOAuthRequest(provider="google", redirect_uri=redirect_uri)

    def test_redirect_uri_is_kept_verbatim(self):
        """The provider compares the redirect URI exactly."""
        request = StartOAuthRequest(
            provider="google", redirect_uri="https://app.example.com"
        )

        assert request.redirect_uri == "https://app.example.com"


class TestHandleOAuthCallback:
    """Tests for HandleOAuthCallbackUseCase."""

    @pytest.mark.asyncio
    async def test_new_identity_creates_user_with_one_account(
        self, start, callback, user_repo, token_service
    ):
        state = await start_flow(start)

        response = await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="c", state=state)
        )

        assert user_repo.count() == 1
        user = await user_repo.find_by_email(Email("a@b.com"))
        assert user.kind == UserKind.FEDERATED
        assert len(user.accounts) == 1
        assert user.accounts[0].provider_user_id.root == "g1"
        assert user.name == Name("A B")

        payload = token_service.verify(response.access_token.token)
        assert payload.sub == str(user.id)
        assert [(a.provider, a.provider_user_id) for a in payload.provider_accounts] == [
            ("google", "g1")
        ]

    @pytest.mark.asyncio
    async def test_profile_request_uses_stored_verifier(
        self, start, callback, state_store, google
    ):
        state = await start_flow(start)
        record = await state_store.get(state, FIXED_NOW)

        await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="the-code", state=state)
        )

        (profile_request,) = google.profile_requests
        assert profile_request.code == "the-code"
        assert profile_request.code_verifier == record.code_verifier
        assert profile_request.redirect_uri == REDIRECT_URI

    @pytest.mark.asyncio
    async def test_existing_email_links_account(
        self, start, callback, user_service, user_repo, account_repo, token_service
    ):
        existing = await user_service.register(
            User.create_local(
                name=Name("Existing"),
                email=Email("A@B.com"),
                password_hash=PasswordHash("$argon2id$hash"),
            )
        )
        state = await start_flow(start)

        response = await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="c", state=state)
        )

        assert user_repo.count() == 1
        assert account_repo.link_calls == 1
        assert token_service.verify(response.access_token.token).sub == str(
            existing.id
        )

        stored = await user_repo.find_by_id(existing.id)
        assert stored.kind == UserKind.HYBRID
        assert stored.is_account_linked(Provider.GOOGLE)

    @pytest.mark.asyncio
    async def test_existing_account_is_reused_without_writes(
        self, start, callback, user_repo, account_repo
    ):
        first = await callback.execute(
            HandleOAuthCallbackRequest(
                provider="google", code="c", state=await start_flow(start)
            )
        )

        second = await callback.execute(
            HandleOAuthCallbackRequest(
                provider="google", code="c", state=await start_flow(start)
            )
        )

        assert second.user.id == first.user.id
        assert user_repo.count() == 1
        assert account_repo.link_calls == 0

    @pytest.mark.asyncio
    async def test_existing_account_wins_even_without_email(
        self, start, callback, google, user_repo
    ):
        first = await callback.execute(
            HandleOAuthCallbackRequest(
                provider="google", code="c", state=await start_flow(start)
            )
        )
        google.profile = google.profile.model_copy(update={"email": None})

        second = await callback.execute(
            HandleOAuthCallbackRequest(
                provider="google", code="c", state=await start_flow(start)
            )
        )

        assert second.user.id == first.user.id

    @pytest.mark.asyncio
    async def test_unknown_state_fails(self, callback, google):
        with pytest.raises(OAuthStateExpiredError):
            await callback.execute(
                HandleOAuthCallbackRequest(provider="google", code="c", state="nope")
            )

        assert google.profile_requests == []

    @pytest.mark.asyncio
    async def test_state_is_single_use(self, start, callback):
        state = await start_flow(start)
        await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="c", state=state)
        )

        with pytest.raises(OAuthStateExpiredError):
            await callback.execute(
                HandleOAuthCallbackRequest(provider="google", code="c", state=state)
            )

    @pytest.mark.asyncio
    async def test_provider_mismatch_fails_and_consumes_state(
        self, start, callback, state_store, github
    ):
        state = await start_flow(start, provider="google")

        with pytest.raises(OAuthStateExpiredError):
            await callback.execute(
                HandleOAuthCallbackRequest(provider="github", code="c", state=state)
            )

        assert github.profile_requests == []
        assert await state_store.consume(state) is None

    @pytest.mark.asyncio
    async def test_expired_state_fails_and_is_consumed(
        self, start, callback, state_store, clock, google
    ):
        state = await start_flow(start)
        clock.advance(minutes=10)

        with pytest.raises(OAuthStateExpiredError):
            await callback.execute(
                HandleOAuthCallbackRequest(provider="google", code="c", state=state)
            )

        assert google.profile_requests == []
        assert len(state_store) == 0

    @pytest.mark.asyncio
    async def test_state_valid_just_before_expiry(self, start, callback, clock):
        state = await start_flow(start)
        clock.advance(minutes=9, seconds=59)

        response = await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="c", state=state)
        )

        assert response.user.email == "a@b.com"

    @pytest.mark.asyncio
    async def test_new_identity_without_email_fails(
        self, start, callback, google, user_repo
    ):
        google.profile = google.profile.model_copy(update={"email": None})
        state = await start_flow(start)

        with pytest.raises(OAuthProfileEmailRequiredError) as exc_info:
            await callback.execute(
                HandleOAuthCallbackRequest(provider="google", code="c", state=state)
            )

        assert exc_info.value.provider == "google"
        assert user_repo.count() == 0

    @pytest.mark.asyncio
    async def test_display_name_falls_back_to_email_local_part(
        self, start, callback, google
    ):
        google.profile = google.profile.model_copy(update={"name": None})
        state = await start_flow(start)

        response = await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="c", state=state)
        )

        assert response.user.name == "a"

    @pytest.mark.asyncio
    async def test_long_provider_name_is_truncated(self, start, callback, google):
        google.profile = google.profile.model_copy(update={"name": "n" * 300})
        state = await start_flow(start)

        response = await callback.execute(
            HandleOAuthCallbackRequest(provider="google", code="c", state=state)
        )

        assert len(response.user.name) == 120

    @pytest.mark.asyncio
    async def test_concurrent_link_surfaces_account_already_linked(
        self, start, callback, user_service, account_repo
    ):
        """A link that loses the race at storage is reported, not ignored."""
        await user_service.register(
            User.create_local(
                name=Name("Existing"),
                email=Email("a@b.com"),
                password_hash=PasswordHash("$argon2id$hash"),
            )
        )
        other = await user_service.register(
            User.create_local(
                name=Name("Other"),
                email=Email("other@b.com"),
                password_hash=PasswordHash("$argon2id$hash"),
            )
        )
        state = await start_flow(start)

        original_find = account_repo.find_by_provider_user_id

        async def racing_find(provider, provider_user_id):
            result = await original_find(provider, provider_user_id)
            # Another callback links the same identity in the meantime
            account = other.link_account(provider, provider_user_id)
            await user_service.link_account(other, account)
            return result

        account_repo.find_by_provider_user_id = racing_find

        with pytest.raises(AccountAlreadyLinkedError):
            await callback.execute(
                HandleOAuthCallbackRequest(provider="google", code="c", state=state)
            )

    @pytest.mark.asyncio
    async def test_provider_failure_propagates_and_consumes_state(
        self, start, callback, google, state_store
    ):
        async def failing_profile(request):
            raise ProviderError("google", "Token exchange failed")

        google.get_profile = failing_profile
        state = await start_flow(start)

        with pytest.raises(ProviderError):
            await callback.execute(
                HandleOAuthCallbackRequest(provider="google", code="c", state=state)
            )

        assert len(state_store) == 0
