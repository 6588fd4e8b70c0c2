"""Domain services and service ports."""

from .base import Service
from .oauth_provider import (
    OAuthAuthorizationRequest,
    OAuthProfile,
    OAuthProfileRequest,
    OAuthProvider,
)
from .oauth_registry import OAuthProviderRegistry
from .password_hasher import PasswordHasher
from .token_service import AccessToken, ProviderAccount, TokenPayload, TokenService
from .user_service import UserService

__all__ = [
    "AccessToken",
    "OAuthAuthorizationRequest",
    "OAuthProfile",
    "OAuthProfileRequest",
    "OAuthProvider",
    "OAuthProviderRegistry",
    "PasswordHasher",
    "ProviderAccount",
    "Service",
    "TokenPayload",
    "TokenService",
    "UserService",
]
