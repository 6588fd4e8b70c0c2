"""Repository interfaces for the identity domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from ident.domain.repository.account import AccountRepository, LinkedAccount
from ident.domain.repository.error import (
    MissingUserError,
    RepositoryError,
    UniqueViolationError,
)
from ident.domain.repository.oauth_state import OAuthStateStore
from ident.domain.repository.user import UserRepository

__all__ = [
    "AccountRepository",
    "LinkedAccount",
    "MissingUserError",
    "OAuthStateStore",
    "RepositoryError",
    "UniqueViolationError",
    "UserRepository",
]
