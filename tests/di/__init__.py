"""Mock providers for testing."""

from .oauth import MockOAuthClientsProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockOAuthClientsProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
