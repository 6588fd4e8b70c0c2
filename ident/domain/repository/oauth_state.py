"""OAuth state store interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from ident.domain.model.oauth_state import OAuthStateRecord


class OAuthStateStore(ABC):
    """Storage for in-flight OAuth authorization attempts."""

    @abstractmethod
    async def save(self, record: OAuthStateRecord) -> None:
        """Store a new state record."""
        pass

    @abstractmethod
    async def get(self, state: str, now: datetime) -> OAuthStateRecord | None:
        """Read a live record without consuming it.

        Expired records are never returned.
        """
        pass

    @abstractmethod
    async def consume(self, state: str) -> OAuthStateRecord | None:
        """Atomically fetch and delete a record.

        Of any number of concurrent calls for the same state, at most one
        receives the record. Expiry is left to the caller, since the record
        must be destroyed either way.
        """
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Delete every record expired at ``now``.

        Returns:
            Number of records deleted
        """
        pass
