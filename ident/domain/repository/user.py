"""User repository interface."""

from abc import ABC, abstractmethod

from ident.domain.model.user import User
from ident.domain.value import Email, Provider, ProviderUserId, UserId


class UserRepository(ABC):
    """Repository for the User aggregate.

    Loaded users always carry their full account collection.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> User | None:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: Email) -> User | None:
        """Find a user by normalized email.

        Args:
            email: The user's email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_account(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> User | None:
        """Find the user owning a provider identity.

        The provider user id matches case-insensitively.

        Args:
            provider: The identity provider
            provider_user_id: The user's ID on that provider

        Returns:
            The owning user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Insert a new user together with its accounts.

        Args:
            user: The user to insert

        Returns:
            The saved user

        Raises:
            UniqueViolationError: On a duplicate email ("email") or a
                provider identity already owned elsewhere ("account")
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update an existing user's profile fields.

        Accounts are not touched; link them through AccountRepository.

        Args:
            user: The user to update

        Returns:
            The updated user

        Raises:
            MissingUserError: If the user does not exist
            UniqueViolationError: If the new email belongs to another user
        """
        pass
