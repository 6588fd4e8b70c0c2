"""Storage conflict signals raised by repository implementations.

Domain services translate these into caller-facing domain errors.
"""

from typing import Literal

Constraint = Literal["email", "account"]


class RepositoryError(Exception):
    """Base repository error."""

    pass


class UniqueViolationError(RepositoryError):
    """Raised when a write collides with a uniqueness constraint."""

    def __init__(self, constraint: Constraint, detail: str | None = None):
        self.constraint = constraint
        super().__init__(detail or f"Unique constraint violated: {constraint}")


class MissingUserError(RepositoryError):
    """Raised when a write references a user that does not exist."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User {user_id} does not exist")
