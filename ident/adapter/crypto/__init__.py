"""Cryptographic adapters."""

from .argon2_hasher import Argon2PasswordHasher
from .jwt_token_service import JWTTokenService

__all__ = ["Argon2PasswordHasher", "JWTTokenService"]
