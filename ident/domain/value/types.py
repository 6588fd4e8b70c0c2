"""Identity value objects.

Value objects are immutable and defined by their values. Each one
normalizes its input and rejects malformed values at construction, raising
``pydantic.ValidationError``.
"""

import re
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, field_validator

from ident.domain.value.common import RootValueObject

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

EMAIL_MAX_LENGTH = 320
NAME_MAX_LENGTH = 120
PROVIDER_USER_ID_MAX_LENGTH = 255


class Provider(str, Enum):
    """Identity provider codes.

    ``LOCAL`` marks email/password credentials; it never has an OAuth
    adapter.
    """

    GOOGLE = "google"
    GITHUB = "github"
    LOCAL = "local"

    @classmethod
    def _missing_(cls, value: object) -> "Provider | None":
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


def _normalize_provider_code(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


# Provider field type that accepts codes in any case
ProviderCode = Annotated[Provider, BeforeValidator(_normalize_provider_code)]


class UserKind(str, Enum):
    """How a user can authenticate.

    Derived from the aggregate, never stored.
    """

    LOCAL = "local"  # password only
    FEDERATED = "federated"  # linked provider accounts only
    HYBRID = "hybrid"  # both


class Email(RootValueObject[str]):
    """Email address, trimmed and lowercased.

    Lowercasing makes equality (and storage uniqueness) case-insensitive.
    """

    @field_validator("root")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Normalize and validate email format."""
        normalized = v.strip().lower()
        if not normalized:
            raise ValueError("Email is required")
        if len(normalized) > EMAIL_MAX_LENGTH:
            raise ValueError("Email is too long")
        if not EMAIL_PATTERN.match(normalized):
            raise ValueError(f"Invalid email: {v}")
        return normalized

    @property
    def local_part(self) -> str:
        """Portion before the @."""
        return self.root.split("@", 1)[0]


class Name(RootValueObject[str]):
    """Display name, 1-120 characters after trimming."""

    @field_validator("root")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Trim and validate name length."""
        normalized = v.strip()
        if not normalized:
            raise ValueError("Name cannot be empty")
        if len(normalized) > NAME_MAX_LENGTH:
            raise ValueError("Name is too long")
        return normalized


class PasswordHash(RootValueObject[str]):
    """Opaque encoded password hash produced by a PasswordHasher."""

    @field_validator("root")
    @classmethod
    def validate_hash(cls, v: str) -> str:
        """Validate hash is not blank."""
        normalized = v.strip()
        if not normalized:
            raise ValueError("Password hash cannot be empty")
        return normalized

    def __repr__(self) -> str:
        return "PasswordHash('***')"


class ProviderUserId(RootValueObject[str]):
    """Provider-assigned account identifier.

    Kept as given (trimmed); comparisons against linked accounts are
    case-insensitive.
    """

    @field_validator("root")
    @classmethod
    def validate_provider_user_id(cls, v: str) -> str:
        """Trim and validate provider user id."""
        normalized = v.strip()
        if not normalized:
            raise ValueError("Provider user id cannot be empty")
        if len(normalized) > PROVIDER_USER_ID_MAX_LENGTH:
            raise ValueError("Provider user id is too long")
        return normalized

    @property
    def folded(self) -> str:
        """Case-folded form used for uniqueness comparisons."""
        return self.root.lower()
