"""Unit tests for local registration and login."""

import pytest
from pydantic import ValidationError

from ident.application.usecase.auth import (
    LoginLocalRequest,
    LoginLocalUseCase,
    RegisterLocalUserRequest,
    RegisterLocalUserUseCase,
)
from ident.domain.error import EmailAlreadyTakenError, InvalidCredentialsError
from ident.domain.model import User
from ident.domain.service import UserService
from ident.domain.value import Email, Name, Provider, ProviderUserId, new_user_id
from ident.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryUserRepository,
)


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def user_service(user_repo) -> UserService:
    return UserService(user_repo, InMemoryAccountRepository(user_repo))


@pytest.fixture
def register(user_service, password_hasher, token_service) -> RegisterLocalUserUseCase:
    return RegisterLocalUserUseCase(
        user_service=user_service,
        password_hasher=password_hasher,
        token_service=token_service,
    )


@pytest.fixture
def login(user_service, password_hasher, token_service) -> LoginLocalUseCase:
    return LoginLocalUseCase(
        user_service=user_service,
        password_hasher=password_hasher,
        token_service=token_service,
    )


class TestRegisterLocalUser:
    """Tests for RegisterLocalUserUseCase."""

    @pytest.mark.asyncio
    async def test_register_creates_user_and_issues_token(
        self, register, user_repo, token_service
    ):
        response = await register.execute(
            RegisterLocalUserRequest(
                name=" Ada Lovelace ", email="Ada@Example.com", password="correct horse"
            )
        )

        assert response.user.name == "Ada Lovelace"
        assert response.user.email == "ada@example.com"
        assert user_repo.count() == 1

        payload = token_service.verify(response.access_token.token)
        assert payload.sub == response.user.id
        assert payload.email == "ada@example.com"
        # Local users carry a synthetic local entry keyed by their id
        assert [(a.provider, a.provider_user_id) for a in payload.provider_accounts] == [
            ("local", response.user.id)
        ]

    @pytest.mark.asyncio
    async def test_password_is_stored_hashed(self, register, user_repo, password_hasher):
        response = await register.execute(
            RegisterLocalUserRequest(
                name="Ada", email="ada@example.com", password="correct horse"
            )
        )

        stored = await user_repo.find_by_email(Email("ada@example.com"))
        assert stored.password_hash.root != "correct horse"
        assert await password_hasher.verify("correct horse", stored.password_hash)
        assert str(stored.id) == response.user.id

    @pytest.mark.asyncio
    async def test_duplicate_email_fails_without_partial_write(
        self, register, user_repo
    ):
        """Second registration with the same email, in any case, fails."""
        await register.execute(
            RegisterLocalUserRequest(
                name="Ada", email="ada@example.com", password="correct horse"
            )
        )

        with pytest.raises(EmailAlreadyTakenError) as exc_info:
            await register.execute(
                RegisterLocalUserRequest(
                    name="Impostor", email="ADA@example.com", password="other pass"
                )
            )

        assert exc_info.value.email == "ada@example.com"
        assert user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_race_lost_at_storage_still_reports_email_taken(
        self, register, user_repo, user_service
    ):
        """A conflict detected only by storage is reported the same way."""
        existing = User.create_local(
            name=Name("Ada"),
            email=Email("ada@example.com"),
            password_hash=(await register.password_hasher.hash("x" * 8)),
        )

        async def find_nothing(email):
            # Simulates the concurrent insert landing after the lookup
            await user_repo.save(existing)
            return None

        user_service.find_by_email = find_nothing

        with pytest.raises(EmailAlreadyTakenError):
            await register.execute(
                RegisterLocalUserRequest(
                    name="Ada 2", email="ada@example.com", password="correct horse"
                )
            )

        assert user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_invalid_email_propagates_validation_error(self, register):
        with pytest.raises(ValidationError):
            await register.execute(
                RegisterLocalUserRequest(
                    name="Ada", email="not-an-email", password="correct horse"
                )
            )

    @pytest.mark.asyncio
    async def test_blank_name_propagates_validation_error(self, register):
        with pytest.raises(ValidationError):
            await register.execute(
                RegisterLocalUserRequest(
                    name="   ", email="ada@example.com", password="correct horse"
                )
            )

    def test_short_password_rejected_by_request(self):
        with pytest.raises(ValidationError):
            RegisterLocalUserRequest(name="Ada", email="ada@example.com", password="short")


class TestLoginLocal:
    """Tests for LoginLocalUseCase."""

    @pytest.mark.asyncio
    async def test_register_then_login_returns_same_user(self, register, login):
        registered = await register.execute(
            RegisterLocalUserRequest(
                name="Ada", email="ada@example.com", password="correct horse"
            )
        )

        logged_in = await login.execute(
            LoginLocalRequest(email="ADA@example.com", password="correct horse")
        )

        assert logged_in.user.id == registered.user.id
        assert logged_in.access_token.token

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable(
        self, register, login, user_service
    ):
        """Wrong password, unknown email and federated-only users look alike."""
        await register.execute(
            RegisterLocalUserRequest(
                name="Ada", email="ada@example.com", password="correct horse"
            )
        )
        federated = User.create(
            user_id=new_user_id(), name=Name("Fed"), email=Email("fed@example.com")
        )
        federated.link_account(Provider.GOOGLE, ProviderUserId("g1"))
        await user_service.register(federated)

        messages = []
        for email, password in [
            ("ada@example.com", "wrong password"),
            ("nobody@example.com", "correct horse"),
            ("fed@example.com", "correct horse"),
            ("not-an-email", "correct horse"),
        ]:
            with pytest.raises(InvalidCredentialsError) as exc_info:
                await login.execute(LoginLocalRequest(email=email, password=password))
            messages.append(str(exc_info.value))

        assert len(set(messages)) == 1

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_the_hasher(self, login, password_hasher):
        """Unknown users should cost one hash, like a real verification."""
        calls = []
        original = password_hasher.hash

        async def counting_hash(plain):
            calls.append(plain)
            return await original(plain)

        password_hasher.hash = counting_hash

        with pytest.raises(InvalidCredentialsError):
            await login.execute(
                LoginLocalRequest(email="nobody@example.com", password="guess")
            )

        assert calls == ["guess"]

    @pytest.mark.asyncio
    async def test_malformed_email_still_runs_the_hasher(self, login, password_hasher):
        """A malformed email should cost the same hash as an unknown one."""
        calls = []
        original = password_hasher.hash

        async def counting_hash(plain):
            calls.append(plain)
            return await original(plain)

        password_hasher.hash = counting_hash

        with pytest.raises(InvalidCredentialsError):
            await login.execute(
                LoginLocalRequest(email="not-an-email", password="guess")
            )

        assert calls == ["guess"]
