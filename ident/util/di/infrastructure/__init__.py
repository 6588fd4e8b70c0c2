"""Infrastructure providers."""

# Import bases
from .crypto import ProdCryptoProvider
from .oauth import OAuthClientsProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .oauth import ProdOAuthClientsProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "OAuthClientsProvider",
    "PersistenceProvider",
    "ProdCryptoProvider",
    "ProdOAuthClientsProvider",
    "ProdPersistenceProvider",
]
