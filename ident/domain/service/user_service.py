"""User domain service."""

import logfire

from ident.domain.error import (
    AccountAlreadyLinkedError,
    EmailAlreadyTakenError,
    UserNotFoundError,
)
from ident.domain.model import Account, User
from ident.domain.repository import (
    AccountRepository,
    LinkedAccount,
    MissingUserError,
    UniqueViolationError,
    UserRepository,
)
from ident.domain.value import Email, Provider, ProviderUserId, UserId

from .base import Service


class UserService(Service):
    """Domain service for user operations.

    Storage enforces uniqueness; this service turns its conflict signals
    into the domain errors callers handle.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        account_repository: AccountRepository,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            account_repository: Account repository
        """
        self.user_repository = user_repository
        self.account_repository = account_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            UserNotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise UserNotFoundError(str(user_id))
            return user

    async def find_by_email(self, email: Email) -> User | None:
        """Get user by email, or None."""
        with logfire.span("user_service.find_by_email"):
            user = await self.user_repository.find_by_email(email)
            if user:
                logfire.info("User found by email", user_id=str(user.id))
            return user

    async def find_by_account(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> LinkedAccount | None:
        """Get the account and owning user for a provider identity, or None."""
        with logfire.span(
            "user_service.find_by_account",
            provider=provider.value,
            provider_user_id=provider_user_id.root,
        ):
            linked = await self.account_repository.find_by_provider_user_id(
                provider, provider_user_id
            )
            if linked:
                logfire.info(
                    "Account found",
                    provider=provider.value,
                    user_id=str(linked.user.id),
                )
            return linked

    async def register(self, user: User) -> User:
        """Persist a new user with any accounts it already holds.

        Raises:
            EmailAlreadyTakenError: If another user owns the email
            AccountAlreadyLinkedError: If one of its accounts is owned elsewhere
        """
        with logfire.span("user_service.register", user_id=str(user.id)):
            try:
                saved = await self.user_repository.save(user)
            except UniqueViolationError as e:
                logfire.warn(
                    "User registration conflict",
                    user_id=str(user.id),
                    constraint=e.constraint,
                )
                if e.constraint == "email":
                    raise EmailAlreadyTakenError(user.email.root) from e
                account = user.accounts[0] if user.accounts else None
                raise AccountAlreadyLinkedError(
                    account.provider.value if account else "unknown",
                    account.provider_user_id.root if account else "unknown",
                ) from e

            logfire.info(
                "User registered", user_id=str(saved.id), kind=saved.kind.value
            )
            return saved

    async def link_account(self, user: User, account: Account) -> Account:
        """Persist an account already added to ``user``.

        Raises:
            AccountAlreadyLinkedError: If the identity is owned by any user
            UserNotFoundError: If the user vanished
        """
        with logfire.span(
            "user_service.link_account",
            user_id=str(user.id),
            provider=account.provider.value,
        ):
            try:
                stored = await self.account_repository.link_to_user(user, account)
            except UniqueViolationError as e:
                logfire.warn(
                    "Account already linked",
                    provider=account.provider.value,
                    provider_user_id=account.provider_user_id.root,
                )
                raise AccountAlreadyLinkedError(
                    account.provider.value, account.provider_user_id.root
                ) from e
            except MissingUserError as e:
                raise UserNotFoundError(str(user.id)) from e

            logfire.info(
                "Account linked", user_id=str(user.id), provider=account.provider.value
            )
            return stored

    async def update(self, user: User) -> User:
        """Persist profile changes.

        Raises:
            EmailAlreadyTakenError: If the new email belongs to another user
            UserNotFoundError: If the user does not exist
        """
        with logfire.span("user_service.update", user_id=str(user.id)):
            try:
                updated = await self.user_repository.update(user)
            except UniqueViolationError as e:
                raise EmailAlreadyTakenError(user.email.root) from e
            except MissingUserError as e:
                raise UserNotFoundError(str(user.id)) from e

            logfire.info("User updated", user_id=str(updated.id))
            return updated
