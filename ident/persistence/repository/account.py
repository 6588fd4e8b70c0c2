"""Account repository implementation using PostgreSQL."""

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ident.domain.model import Account, User
from ident.domain.repository import AccountRepository, LinkedAccount
from ident.domain.value import Provider, ProviderUserId, UserId
from ident.persistence.errors import translate_integrity_error
from ident.persistence.mappers import account_to_dict, row_to_account
from ident.persistence.repository.user import load_user
from ident.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_provider_user_id(
        self, provider: Provider, provider_user_id: ProviderUserId
    ) -> LinkedAccount | None:
        stmt = select(accounts_table).where(
            accounts_table.c.provider == provider.value,
            func.lower(accounts_table.c.provider_user_id) == provider_user_id.folded,
        )
        row = (await self.session.execute(stmt)).mappings().first()
        if not row:
            return None

        user = await load_user(self.session, UserId(row["user_id"]))
        if user is None:
            return None
        return LinkedAccount(user=user, account=row_to_account(dict(row)))

    async def link_to_user(self, user: User, account: Account) -> Account:
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    accounts_table.insert().values(**account_to_dict(user.id, account))
                )
        except IntegrityError as e:
            raise translate_integrity_error(e, str(user.id)) from e

        return account
