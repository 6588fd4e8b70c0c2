"""Account repository interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ident.domain.model.account import Account
from ident.domain.model.user import User
from ident.domain.value import Provider, ProviderUserId


@dataclass(frozen=True)
class LinkedAccount:
    """An account together with its owning user."""

    user: User
    account: Account


class AccountRepository(ABC):
    """Repository for linked provider accounts."""

    @abstractmethod
    async def find_by_provider_user_id(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> LinkedAccount | None:
        """Find an account and its owner by provider identity.

        Args:
            provider: The identity provider
            provider_user_id: The user's ID on that provider (case-insensitive)

        Returns:
            The linked account if found, None otherwise
        """
        pass

    @abstractmethod
    async def link_to_user(self, user: User, account: Account) -> Account:
        """Persist a new account for an existing user.

        Args:
            user: The owning user
            account: The account, already added to the user aggregate

        Returns:
            The stored account

        Raises:
            UniqueViolationError: If the identity is linked to any user
            MissingUserError: If the user does not exist
        """
        pass
