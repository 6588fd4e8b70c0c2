"""Mappers for converting between database rows and domain models.

Domain models are Pydantic models, so rows are mapped by hand instead of
through SQLAlchemy's ORM.
"""

from collections.abc import Iterable
from typing import Any
from uuid import UUID, uuid4

from ident.domain.model import Account, OAuthStateRecord, User
from ident.domain.value import UserId


def row_to_account(row: dict[str, Any]) -> Account:
    """Convert database row to Account domain model."""
    return Account(
        provider=row["provider"],
        provider_user_id=row["provider_user_id"],
        email=row.get("email"),
    )


def row_to_user(
    row: dict[str, Any], account_rows: Iterable[dict[str, Any]] = ()
) -> User:
    """Convert a users row plus its accounts rows to a User aggregate."""
    user_id = row["id"] if isinstance(row["id"], UUID) else UUID(row["id"])
    return User(
        id=UserId(user_id),
        name=row["name"],
        email=row["email"],
        password_hash=row.get("password_hash"),
        accounts=tuple(row_to_account(account) for account in account_rows),
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> dict[str, Any]:
    """Convert User domain model to a users row (accounts excluded)."""
    return {
        "id": user.id,
        "name": user.name.root,
        "email": user.email.root,
        "password_hash": user.password_hash.root if user.password_hash else None,
        "created_at": user.created_at,
    }


def account_to_dict(user_id: UserId, account: Account) -> dict[str, Any]:
    """Convert Account domain model to an accounts row."""
    return {
        "id": uuid4(),
        "user_id": user_id,
        "provider": account.provider.value,
        "provider_user_id": account.provider_user_id.root,
        "email": account.email.root if account.email else None,
    }


def row_to_oauth_state(row: dict[str, Any]) -> OAuthStateRecord:
    """Convert database row to OAuthStateRecord."""
    return OAuthStateRecord(
        state=row["state"],
        provider=row["provider"],
        code_verifier=row["code_verifier"],
        nonce=row.get("nonce"),
        redirect_uri=row["redirect_uri"],
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


def oauth_state_to_dict(record: OAuthStateRecord) -> dict[str, Any]:
    """Convert OAuthStateRecord to an oauth_states row."""
    return {
        "state": record.state,
        "provider": record.provider.value,
        "code_verifier": record.code_verifier,
        "nonce": record.nonce,
        "redirect_uri": record.redirect_uri,
        "created_at": record.created_at,
        "expires_at": record.expires_at,
    }
