"""Integration tests for the PostgreSQL repositories.

Require a migrated database at DATABASE__URL.
"""

import asyncio
import os
from datetime import timedelta
from uuid import uuid4

import pytest

from ident.domain.model import OAuthStateRecord, User
from ident.domain.repository import (
    AccountRepository,
    OAuthStateStore,
    UniqueViolationError,
    UserRepository,
)
from ident.domain.value import (
    Email,
    Name,
    PasswordHash,
    Provider,
    ProviderUserId,
    new_user_id,
)
from ident.util.clock import utc_now
from tests.harness import create_env_fixture

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.getenv("DATABASE__URL"), reason="requires PostgreSQL (DATABASE__URL)"
    ),
]

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


def unique_email() -> Email:
    return Email(f"user-{uuid4().hex[:12]}@example.com")


def local_user(email: Email | None = None) -> User:
    return User.create_local(
        name=Name("Integration"),
        email=email or unique_email(),
        password_hash=PasswordHash("$argon2id$hash"),
    )


class TestPostgresUserRepository:
    """Integration tests for PostgresUserRepository."""

    @pytest.mark.asyncio
    async def test_save_and_load_with_accounts(self, integration_env):
        repo = await integration_env.get(UserRepository)
        user = User.create(
            user_id=new_user_id(), name=Name("Fed"), email=unique_email()
        )
        puid = ProviderUserId(f"Gh-{uuid4().hex[:8]}")
        user.link_account(Provider.GITHUB, puid)

        await repo.save(user)

        by_email = await repo.find_by_email(user.email)
        by_account = await repo.find_by_account(
            Provider.GITHUB, ProviderUserId(puid.root.lower())
        )
        assert by_email.id == user.id
        assert by_account.id == user.id
        assert by_email.accounts[0].provider_user_id == puid

    @pytest.mark.asyncio
    async def test_accounts_load_in_link_order(self, integration_env):
        repo = await integration_env.get(UserRepository)
        user = User.create(
            user_id=new_user_id(), name=Name("Fed"), email=unique_email()
        )
        suffix = uuid4().hex[:8]
        user.link_account(Provider.GOOGLE, ProviderUserId(f"g-{suffix}"))
        user.link_account(Provider.GITHUB, ProviderUserId(f"gh-{suffix}"))

        # Both rows share one transaction timestamp
        await repo.save(user)

        for _ in range(3):
            loaded = await repo.find_by_email(user.email)
            assert [a.provider for a in loaded.accounts] == [
                Provider.GOOGLE,
                Provider.GITHUB,
            ]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_unique_violation(self, integration_env):
        repo = await integration_env.get(UserRepository)
        email = unique_email()
        await repo.save(local_user(email))

        with pytest.raises(UniqueViolationError) as exc_info:
            await repo.save(local_user(email))

        assert exc_info.value.constraint == "email"
        # The request transaction is still usable after the savepoint rollback
        assert await repo.find_by_email(email) is not None


class TestPostgresAccountRepository:
    """Integration tests for PostgresAccountRepository."""

    @pytest.mark.asyncio
    async def test_duplicate_link_is_a_unique_violation(self, integration_env):
        users = await integration_env.get(UserRepository)
        accounts = await integration_env.get(AccountRepository)
        first = await users.save(local_user())
        second = await users.save(local_user())
        puid = ProviderUserId(f"g-{uuid4().hex[:8]}")

        await accounts.link_to_user(first, first.link_account(Provider.GOOGLE, puid))

        with pytest.raises(UniqueViolationError) as exc_info:
            await accounts.link_to_user(
                second,
                second.link_account(Provider.GOOGLE, ProviderUserId(puid.root.upper())),
            )

        assert exc_info.value.constraint == "account"
        linked = await accounts.find_by_provider_user_id(Provider.GOOGLE, puid)
        assert linked.user.id == first.id


class TestPostgresOAuthStateStore:
    """Integration tests for PostgresOAuthStateStore."""

    @pytest.mark.asyncio
    async def test_concurrent_consume_returns_record_once(self, integration_env):
        store = await integration_env.get(OAuthStateStore)
        now = utc_now()
        record = OAuthStateRecord(
            state=uuid4().hex,
            provider=Provider.GOOGLE,
            code_verifier="verifier",
            redirect_uri="https://app/cb",
            created_at=now,
            expires_at=now + timedelta(minutes=10),
        )
        await store.save(record)

        results = await asyncio.gather(*(store.consume(record.state) for _ in range(5)))

        assert sum(result is not None for result in results) == 1
        assert await store.get(record.state, now) is None
