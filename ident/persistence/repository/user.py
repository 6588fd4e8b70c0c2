"""User repository implementation using PostgreSQL."""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ident.domain.model import User
from ident.domain.repository import MissingUserError, UserRepository
from ident.domain.value import Email, Provider, ProviderUserId, UserId
from ident.persistence.errors import translate_integrity_error
from ident.persistence.mappers import account_to_dict, row_to_user, user_to_dict
from ident.persistence.tables import accounts_table, users_table


async def load_user(session: AsyncSession, user_id: UserId) -> User | None:
    """Load a user row together with all of its accounts."""
    result = await session.execute(
        select(users_table).where(users_table.c.id == user_id)
    )
    row = result.mappings().first()
    if not row:
        return None

    accounts = await session.execute(
        select(accounts_table)
        .where(accounts_table.c.user_id == user_id)
        .order_by(accounts_table.c.link_order)
    )
    return row_to_user(dict(row), [dict(a) for a in accounts.mappings().all()])


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> User | None:
        return await load_user(self.session, user_id)

    async def find_by_email(self, email: Email) -> User | None:
        stmt = select(users_table.c.id).where(users_table.c.email == email.root)
        user_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if user_id is None:
            return None
        return await load_user(self.session, UserId(user_id))

    async def find_by_account(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> User | None:
        stmt = select(accounts_table.c.user_id).where(
            accounts_table.c.provider == provider.value,
            func.lower(accounts_table.c.provider_user_id) == provider_user_id.folded,
        )
        user_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if user_id is None:
            return None
        return await load_user(self.session, UserId(user_id))

    async def save(self, user: User) -> User:
        """Insert the user and its accounts atomically.

        A savepoint keeps a constraint violation from poisoning the
        surrounding request transaction.
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    users_table.insert().values(**user_to_dict(user))
                )
                for account in user.accounts:
                    await self.session.execute(
                        accounts_table.insert().values(
                            **account_to_dict(user.id, account)
                        )
                    )
        except IntegrityError as e:
            raise translate_integrity_error(e, str(user.id)) from e

        return user

    async def update(self, user: User) -> User:
        values = user_to_dict(user)
        values.pop("id")
        values.pop("created_at")
        values["updated_at"] = datetime.now(timezone.utc)

        try:
            async with self.session.begin_nested():
                result = await self.session.execute(
                    users_table.update()
                    .where(users_table.c.id == user.id)
                    .values(**values)
                )
        except IntegrityError as e:
            raise translate_integrity_error(e, str(user.id)) from e

        if result.rowcount == 0:
            raise MissingUserError(str(user.id))
        return user
