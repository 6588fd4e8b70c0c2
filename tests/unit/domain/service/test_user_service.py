"""Unit tests for UserService."""

import pytest

from ident.domain.error import (
    AccountAlreadyLinkedError,
    EmailAlreadyTakenError,
    UserNotFoundError,
)
from ident.domain.model import User
from ident.domain.service import UserService
from ident.domain.value import (
    Email,
    Name,
    PasswordHash,
    Provider,
    ProviderUserId,
    new_user_id,
)
from ident.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryUserRepository,
)


def make_user(email: str = "ada@example.com") -> User:
    return User.create_local(
        name=Name("Ada"),
        email=Email(email),
        password_hash=PasswordHash("$argon2id$hash"),
    )


@pytest.fixture
def user_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def account_repo(user_repo) -> InMemoryAccountRepository:
    return InMemoryAccountRepository(user_repo)


@pytest.fixture
def service(user_repo, account_repo) -> UserService:
    return UserService(user_repo, account_repo)


class TestRegister:
    """Tests for UserService.register()."""

    @pytest.mark.asyncio
    async def test_register_persists_user(self, service, user_repo):
        user = make_user()

        saved = await service.register(user)

        assert saved.id == user.id
        assert user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_register_translates_email_conflict(self, service, user_repo):
        """A storage email conflict should surface as EmailAlreadyTakenError."""
        await service.register(make_user("ada@example.com"))

        with pytest.raises(EmailAlreadyTakenError) as exc_info:
            await service.register(make_user("ADA@example.com"))

        assert exc_info.value.email == "ada@example.com"
        assert user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_register_translates_account_conflict(self, service, user_repo):
        first = User.create(
            user_id=new_user_id(), name=Name("A"), email=Email("a@example.com")
        )
        first.link_account(Provider.GITHUB, ProviderUserId("42"))
        await service.register(first)

        second = User.create(
            user_id=new_user_id(), name=Name("B"), email=Email("b@example.com")
        )
        second.link_account(Provider.GITHUB, ProviderUserId("42"))

        with pytest.raises(AccountAlreadyLinkedError) as exc_info:
            await service.register(second)

        assert exc_info.value.provider_user_id == "42"
        assert user_repo.count() == 1


class TestGetById:
    """Tests for UserService.get_by_id()."""

    @pytest.mark.asyncio
    async def test_returns_user(self, service):
        user = await service.register(make_user())

        found = await service.get_by_id(user.id)

        assert found.id == user.id
        assert found.email == user.email

    @pytest.mark.asyncio
    async def test_missing_user_raises(self, service):
        missing = new_user_id()

        with pytest.raises(UserNotFoundError) as exc_info:
            await service.get_by_id(missing)

        assert exc_info.value.user_id == str(missing)


class TestLinkAccount:
    """Tests for UserService.link_account()."""

    @pytest.mark.asyncio
    async def test_link_persists_account(self, service):
        user = await service.register(make_user())
        account = user.link_account(Provider.GOOGLE, ProviderUserId("g1"))

        await service.link_account(user, account)

        linked = await service.find_by_account(Provider.GOOGLE, ProviderUserId("g1"))
        assert linked is not None
        assert linked.user.id == user.id
        assert linked.account.provider_user_id.root == "g1"

    @pytest.mark.asyncio
    async def test_linking_same_identity_twice_fails(self, service):
        """The second link of one identity should fail, whoever the user."""
        first = await service.register(make_user("first@example.com"))
        second = await service.register(make_user("second@example.com"))

        await service.link_account(
            first, first.link_account(Provider.GOOGLE, ProviderUserId("g1"))
        )

        with pytest.raises(AccountAlreadyLinkedError):
            await service.link_account(
                second, second.link_account(Provider.GOOGLE, ProviderUserId("G1"))
            )

        linked = await service.find_by_account(Provider.GOOGLE, ProviderUserId("g1"))
        assert linked.user.id == first.id

    @pytest.mark.asyncio
    async def test_link_to_missing_user_raises(self, service):
        ghost = make_user()
        account = ghost.link_account(Provider.GOOGLE, ProviderUserId("g1"))

        with pytest.raises(UserNotFoundError):
            await service.link_account(ghost, account)


class TestUpdate:
    """Tests for UserService.update()."""

    @pytest.mark.asyncio
    async def test_update_changes_name(self, service):
        user = await service.register(make_user())
        user.name = Name("Ada Lovelace")

        await service.update(user)

        assert (await service.get_by_id(user.id)).name == Name("Ada Lovelace")

    @pytest.mark.asyncio
    async def test_update_to_taken_email_fails(self, service):
        await service.register(make_user("taken@example.com"))
        user = await service.register(make_user("mine@example.com"))
        user.email = Email("Taken@Example.com")

        with pytest.raises(EmailAlreadyTakenError):
            await service.update(user)

    @pytest.mark.asyncio
    async def test_update_missing_user_fails(self, service):
        with pytest.raises(UserNotFoundError):
            await service.update(make_user())
