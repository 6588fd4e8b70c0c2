"""In-memory user repository for testing."""

from ident.domain.model import User
from ident.domain.repository import (
    MissingUserError,
    RepositoryError,
    UniqueViolationError,
    UserRepository,
)
from ident.domain.value import Email, Provider, ProviderUserId, UserId


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Enforces the same uniqueness rules as the database schema. Users are
    stored and returned as copies so callers cannot change stored state
    without going through the repository.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}

    async def find_by_id(self, user_id: UserId) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def find_by_email(self, email: Email) -> User | None:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def find_by_account(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> User | None:
        for user in self._users.values():
            if user.find_account(provider, provider_user_id) is not None:
                return user.model_copy(deep=True)
        return None

    async def save(self, user: User) -> User:
        if user.id in self._users:
            raise RepositoryError(f"User {user.id} already exists")
        self._check_email_free(user)
        for account in user.accounts:
            if self.owner_of(account.provider, account.provider_user_id) is not None:
                raise UniqueViolationError("account")

        self._users[user.id] = user.model_copy(deep=True)
        return user

    async def update(self, user: User) -> User:
        stored = self._users.get(user.id)
        if stored is None:
            raise MissingUserError(str(user.id))
        self._check_email_free(user)

        # Accounts are written through the account repository only
        self._users[user.id] = stored.model_copy(
            update={
                "name": user.name,
                "email": user.email,
                "password_hash": user.password_hash,
            }
        )
        return user

    def owner_of(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> User | None:
        """Stored user owning a provider identity, without copying."""
        for user in self._users.values():
            if user.find_account(provider, provider_user_id) is not None:
                return user
        return None

    def get_stored(self, user_id: UserId) -> User | None:
        """Stored user by id, without copying."""
        return self._users.get(user_id)

    def put_stored(self, user: User) -> None:
        """Replace a stored user."""
        self._users[user.id] = user

    def count(self) -> int:
        """Number of stored users."""
        return len(self._users)

    def _check_email_free(self, user: User) -> None:
        for other in self._users.values():
            if other.id != user.id and other.email == user.email:
                raise UniqueViolationError("email")
