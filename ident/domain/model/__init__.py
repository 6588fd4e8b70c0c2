"""Domain model entities."""

from ident.domain.model.account import Account
from ident.domain.model.oauth_state import OAuthStateRecord
from ident.domain.model.user import User

__all__ = [
    "Account",
    "OAuthStateRecord",
    "User",
]
