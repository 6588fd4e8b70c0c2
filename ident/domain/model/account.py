"""Linked provider account entity.

An account is an external identity owned by exactly one user. It is
created and written only through its owning User.
"""

from pydantic import Field

from ident.domain.model.common import DomainModel
from ident.domain.value import Email, Provider, ProviderCode, ProviderUserId


class Account(DomainModel):
    """External provider identity linked to a user."""

    provider: ProviderCode
    provider_user_id: ProviderUserId
    email: Email | None = Field(default=None)  # Verified email snapshot at link time

    @property
    def key(self) -> tuple[Provider, str]:
        """Uniqueness key; the provider user id compares case-insensitively."""
        return (self.provider, self.provider_user_id.folded)

    def matches(self, provider: Provider, provider_user_id: ProviderUserId) -> bool:
        """Whether this account is the given provider identity."""
        return self.key == (provider, provider_user_id.folded)
