"""Shared auth use case results."""

from datetime import datetime

from pydantic import BaseModel

from ident.domain.model import User
from ident.domain.service import AccessToken


class AuthenticatedUser(BaseModel):
    """Public projection of a user."""

    id: str
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedUser":
        return cls(id=str(user.id), email=user.email.root, name=user.name.root)


class AccessTokenInfo(BaseModel):
    """Issued bearer credential."""

    token: str
    expires_at: datetime

    @classmethod
    def from_token(cls, token: AccessToken) -> "AccessTokenInfo":
        return cls(token=token.token, expires_at=token.expires_at)


class AuthResponse(BaseModel):
    """Result of every successful authentication path."""

    user: AuthenticatedUser
    access_token: AccessTokenInfo
