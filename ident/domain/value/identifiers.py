"""Strongly typed identifiers."""

from typing import NewType
from uuid import UUID, uuid4

UserId = NewType("UserId", UUID)


def new_user_id() -> UserId:
    """Generate a fresh random user id."""
    return UserId(uuid4())


def parse_user_id(value: str | UUID) -> UserId:
    """Normalize a user id from its string form.

    Raises:
        ValueError: If the value is not a UUID
    """
    if isinstance(value, UUID):
        return UserId(value)
    return UserId(UUID(value.strip()))
