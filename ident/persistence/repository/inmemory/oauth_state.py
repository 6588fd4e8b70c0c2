"""In-memory OAuth state store for testing."""

import asyncio
from datetime import datetime

from ident.domain.model import OAuthStateRecord
from ident.domain.repository import OAuthStateStore


class InMemoryOAuthStateStore(OAuthStateStore):
    """In-memory implementation of OAuthStateStore for testing."""

    def __init__(self) -> None:
        self._records: dict[str, OAuthStateRecord] = {}
        self._lock = asyncio.Lock()

    async def save(self, record: OAuthStateRecord) -> None:
        async with self._lock:
            self._records[record.state] = record

    async def get(self, state: str, now: datetime) -> OAuthStateRecord | None:
        record = self._records.get(state)
        if record is None or record.is_expired(now):
            return None
        return record

    async def consume(self, state: str) -> OAuthStateRecord | None:
        async with self._lock:
            return self._records.pop(state, None)

    async def purge_expired(self, now: datetime) -> int:
        async with self._lock:
            expired = [s for s, r in self._records.items() if r.is_expired(now)]
            for state in expired:
                del self._records[state]
            return len(expired)

    def __len__(self) -> int:
        return len(self._records)
