"""PostgreSQL repository implementations."""

from ident.persistence.repository.account import PostgresAccountRepository
from ident.persistence.repository.oauth_state import PostgresOAuthStateStore
from ident.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresOAuthStateStore",
    "PostgresUserRepository",
]
