"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .oauth_state import InMemoryOAuthStateStore
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryOAuthStateStore",
    "InMemoryUserRepository",
]
