"""Authentication use cases."""

from .common import AccessTokenInfo, AuthenticatedUser, AuthResponse
from .get_me import GetMeRequest, GetMeResponse, GetMeUseCase
from .handle_oauth_callback import (
    CallbackStage,
    HandleOAuthCallbackRequest,
    HandleOAuthCallbackUseCase,
)
from .login_local import LoginLocalRequest, LoginLocalUseCase
from .logout import LogoutRequest, LogoutResponse, LogoutUseCase
from .register_local import RegisterLocalUserRequest, RegisterLocalUserUseCase
from .start_oauth import StartOAuthRequest, StartOAuthResponse, StartOAuthUseCase

__all__ = [
    "AccessTokenInfo",
    "AuthResponse",
    "AuthenticatedUser",
    "CallbackStage",
    "GetMeRequest",
    "GetMeResponse",
    "GetMeUseCase",
    "HandleOAuthCallbackRequest",
    "HandleOAuthCallbackUseCase",
    "LoginLocalRequest",
    "LoginLocalUseCase",
    "LogoutRequest",
    "LogoutResponse",
    "LogoutUseCase",
    "RegisterLocalUserRequest",
    "RegisterLocalUserUseCase",
    "StartOAuthRequest",
    "StartOAuthResponse",
    "StartOAuthUseCase",
]
