"""GitHub OAuth adapter."""

from .client import (
    GitHubOAuthProvider,
    MockGitHubOAuthProvider,
    RealGitHubOAuthProvider,
)

__all__ = [
    "GitHubOAuthProvider",
    "MockGitHubOAuthProvider",
    "RealGitHubOAuthProvider",
]
