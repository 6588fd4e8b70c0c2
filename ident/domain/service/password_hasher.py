"""Password hashing port."""

from abc import ABC, abstractmethod

from ident.domain.value import PasswordHash


class PasswordHasher(ABC):
    """One-way password hashing.

    Implementations must use a salted, slow KDF and embed their parameters
    in the encoded hash.
    """

    @abstractmethod
    async def hash(self, plain: str) -> PasswordHash:
        """Hash a plaintext password."""
        pass

    @abstractmethod
    async def verify(self, plain: str, password_hash: PasswordHash) -> bool:
        """Check a plaintext password against a stored hash.

        Returns False on mismatch or on a malformed hash; never raises for
        either.
        """
        pass
