"""Google OAuth adapter."""

from .client import (
    GoogleOAuthProvider,
    MockGoogleOAuthProvider,
    RealGoogleOAuthProvider,
)

__all__ = [
    "GoogleOAuthProvider",
    "MockGoogleOAuthProvider",
    "RealGoogleOAuthProvider",
]
