"""User aggregate root.

A user owns its identity invariants independently of storage:

- the email is normalized, and unique system-wide (enforced by storage)
- every linked account is unique by (provider, provider user id), with the
  provider user id compared case-insensitively
- accounts are only added through ``link_account``

Local users carry a password hash; federated users (created from an OAuth
callback) do not. ``kind`` reports which, without a separate type per case.
"""

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ident.domain.error import AccountAlreadyLinkedError
from ident.domain.model.account import Account
from ident.domain.value import (
    Email,
    Name,
    PasswordHash,
    Provider,
    ProviderUserId,
    UserId,
    UserKind,
    new_user_id,
)
from ident.util.clock import utc_now


class User(BaseModel):
    """User aggregate root.

    Not frozen: linking appends to ``accounts``. The account collection is
    a tuple, so callers can read it but never mutate it in place.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: UserId = Field(frozen=True)
    name: Name
    email: Email
    password_hash: PasswordHash | None = Field(default=None, repr=False)
    accounts: tuple[Account, ...] = ()
    created_at: datetime = Field(default_factory=utc_now, frozen=True)

    @field_validator("accounts")
    @classmethod
    def ensure_unique_accounts(cls, v: tuple[Account, ...]) -> tuple[Account, ...]:
        """Reject duplicate (provider, provider user id) pairs."""
        seen: set[tuple[Provider, str]] = set()
        for account in v:
            if account.key in seen:
                raise AccountAlreadyLinkedError(
                    account.provider.value, account.provider_user_id.root
                )
            seen.add(account.key)
        return v

    @classmethod
    def create(
        cls,
        user_id: UserId,
        name: Name,
        email: Email,
        password_hash: PasswordHash | None = None,
        accounts: Iterable[Account] = (),
    ) -> "User":
        """Build a user from already-validated parts.

        Raises:
            AccountAlreadyLinkedError: If ``accounts`` holds a duplicate pair
        """
        return cls(
            id=user_id,
            name=name,
            email=email,
            password_hash=password_hash,
            accounts=tuple(accounts),
        )

    @classmethod
    def create_local(
        cls,
        name: Name,
        email: Email,
        password_hash: PasswordHash,
        user_id: UserId | None = None,
    ) -> "User":
        """Build a locally registered user with a fresh id and no accounts."""
        return cls(
            id=user_id or new_user_id(),
            name=name,
            email=email,
            password_hash=password_hash,
        )

    @property
    def kind(self) -> UserKind:
        """Which credentials this user can authenticate with."""
        if self.password_hash is None:
            return UserKind.FEDERATED
        if self.accounts:
            return UserKind.HYBRID
        return UserKind.LOCAL

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    def find_account(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> Account | None:
        """Return the linked account for a provider identity, if any."""
        for account in self.accounts:
            if account.matches(provider, provider_user_id):
                return account
        return None

    def is_account_linked(self, provider: Provider | str) -> bool:
        """Whether any account for ``provider`` is linked.

        String codes are matched case-insensitively; an unknown code is never
        linked.
        """
        try:
            provider = Provider(provider)
        except ValueError:
            return False
        return any(account.provider == provider for account in self.accounts)

    def link_account(
        self,
        provider: Provider,
        provider_user_id: ProviderUserId,
        email: Email | None = None,
    ) -> Account:
        """Link a new provider identity to this user.

        Returns:
            The new account, for the caller to persist

        Raises:
            AccountAlreadyLinkedError: If the identity is already linked here
        """
        if self.find_account(provider, provider_user_id) is not None:
            raise AccountAlreadyLinkedError(provider.value, provider_user_id.root)

        account = Account(
            provider=provider, provider_user_id=provider_user_id, email=email
        )
        self.accounts = (*self.accounts, account)
        return account
