"""Argon2id password hasher."""

import asyncio

import argon2
from argon2.exceptions import InvalidHashError, VerificationError

from ident.domain.service import PasswordHasher
from ident.domain.value import PasswordHash


class Argon2PasswordHasher(PasswordHasher):
    """Password hasher backed by argon2-cffi (Argon2id).

    Hashing runs in a worker thread so the KDF does not block the event loop.
    """

    def __init__(self, hasher: argon2.PasswordHasher | None = None) -> None:
        """Initialize hasher.

        Args:
            hasher: Configured argon2 hasher; library defaults when omitted
        """
        self._hasher = hasher or argon2.PasswordHasher()

    async def hash(self, plain: str) -> PasswordHash:
        encoded = await asyncio.to_thread(self._hasher.hash, plain)
        return PasswordHash(encoded)

    async def verify(self, plain: str, password_hash: PasswordHash) -> bool:
        try:
            return await asyncio.to_thread(
                self._hasher.verify, password_hash.root, plain
            )
        except (VerificationError, InvalidHashError):
            return False
