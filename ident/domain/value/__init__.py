"""Domain value objects."""

from ident.domain.value.identifiers import UserId, new_user_id, parse_user_id
from ident.domain.value.types import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    Email,
    Name,
    PasswordHash,
    Provider,
    ProviderCode,
    ProviderUserId,
    UserKind,
)

__all__ = [
    # Identifiers
    "UserId",
    "new_user_id",
    "parse_user_id",
    # Types
    "EMAIL_MAX_LENGTH",
    "NAME_MAX_LENGTH",
    "Email",
    "Name",
    "PasswordHash",
    "Provider",
    "ProviderCode",
    "ProviderUserId",
    "UserKind",
]
