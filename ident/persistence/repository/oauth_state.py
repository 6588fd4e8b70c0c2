"""OAuth state store implementation using PostgreSQL."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ident.domain.model import OAuthStateRecord
from ident.domain.repository import OAuthStateStore
from ident.persistence.mappers import oauth_state_to_dict, row_to_oauth_state
from ident.persistence.tables import oauth_states_table


class PostgresOAuthStateStore(OAuthStateStore):
    """PostgreSQL implementation of OAuthStateStore.

    Every call runs in its own committed transaction rather than the
    request session: a consumed state must stay consumed even when the rest
    of the callback fails and the request transaction rolls back.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store.

        Args:
            session_factory: Factory for short-lived sessions
        """
        self.session_factory = session_factory

    async def save(self, record: OAuthStateRecord) -> None:
        async with self.session_factory() as session, session.begin():
            await session.execute(
                oauth_states_table.insert().values(**oauth_state_to_dict(record))
            )

    async def get(self, state: str, now: datetime) -> OAuthStateRecord | None:
        async with self.session_factory() as session:
            result = await session.execute(
                select(oauth_states_table).where(
                    oauth_states_table.c.state == state,
                    oauth_states_table.c.expires_at > now,
                )
            )
            row = result.mappings().first()
        return row_to_oauth_state(dict(row)) if row else None

    async def consume(self, state: str) -> OAuthStateRecord | None:
        """Delete and return the record in one statement.

        Concurrent deletes of the same row serialize on its lock; only the
        first returns it.
        """
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                delete(oauth_states_table)
                .where(oauth_states_table.c.state == state)
                .returning(*oauth_states_table.c)
            )
            row = result.mappings().first()
        return row_to_oauth_state(dict(row)) if row else None

    async def purge_expired(self, now: datetime) -> int:
        async with self.session_factory() as session, session.begin():
            result = await session.execute(
                delete(oauth_states_table).where(oauth_states_table.c.expires_at <= now)
            )
        return result.rowcount
