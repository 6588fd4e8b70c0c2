"""In-memory account repository for testing."""

from ident.domain.model import Account, User
from ident.domain.repository import (
    AccountRepository,
    LinkedAccount,
    MissingUserError,
    UniqueViolationError,
)
from ident.domain.value import Provider, ProviderUserId

from .user import InMemoryUserRepository


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing.

    Accounts live inside the stored users of the shared user repository,
    mirroring the foreign key between the two tables.
    """

    def __init__(self, user_repository: InMemoryUserRepository) -> None:
        self.user_repository = user_repository
        self.link_calls = 0

    async def find_by_provider_user_id(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> LinkedAccount | None:
        owner = self.user_repository.owner_of(provider, provider_user_id)
        if owner is None:
            return None
        account = owner.find_account(provider, provider_user_id)
        return LinkedAccount(user=owner.model_copy(deep=True), account=account)

    async def link_to_user(self, user: User, account: Account) -> Account:
        self.link_calls += 1

        if (
            self.user_repository.owner_of(account.provider, account.provider_user_id)
            is not None
        ):
            raise UniqueViolationError("account")

        stored = self.user_repository.get_stored(user.id)
        if stored is None:
            raise MissingUserError(str(user.id))

        self.user_repository.put_stored(
            stored.model_copy(update={"accounts": (*stored.accounts, account)})
        )
        return account
