"""OAuth state record.

Correlates one in-flight authorization attempt across the provider
redirect. A record is consumable exactly once.
"""

from datetime import datetime

from pydantic import Field

from ident.domain.model.common import DomainModel
from ident.domain.value import ProviderCode


class OAuthStateRecord(DomainModel):
    """Ephemeral, single-use authorization attempt."""

    state: str
    provider: ProviderCode
    code_verifier: str = Field(repr=False)  # PKCE secret
    nonce: str | None = Field(default=None, repr=False)
    redirect_uri: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """A record is live only while ``expires_at`` is strictly after now."""
        return self.expires_at <= now
