"""Translation of database integrity errors into repository signals."""

from sqlalchemy.exc import IntegrityError

from ident.domain.repository import MissingUserError, UniqueViolationError
from ident.persistence.tables import (
    ACCOUNTS_PROVIDER_IDENTITY_INDEX,
    ACCOUNTS_USER_FK,
    USERS_EMAIL_CONSTRAINT,
)


def constraint_name(error: IntegrityError) -> str | None:
    """Name of the violated constraint, as reported by asyncpg."""
    original = getattr(error.orig, "__cause__", None) or error.orig
    name = getattr(original, "constraint_name", None)
    if name:
        return name
    # Fall back to the message for drivers that do not expose the name
    message = str(error.orig)
    for known in (
        USERS_EMAIL_CONSTRAINT,
        ACCOUNTS_PROVIDER_IDENTITY_INDEX,
        ACCOUNTS_USER_FK,
    ):
        if known in message:
            return known
    return None


def translate_integrity_error(error: IntegrityError, user_id: str) -> Exception:
    """Map an IntegrityError to the matching repository error.

    Unrecognized violations are returned unchanged.
    """
    name = constraint_name(error)
    if name == USERS_EMAIL_CONSTRAINT:
        return UniqueViolationError("email")
    if name == ACCOUNTS_PROVIDER_IDENTITY_INDEX:
        return UniqueViolationError("account")
    if name == ACCOUNTS_USER_FK:
        return MissingUserError(user_id)
    return error
