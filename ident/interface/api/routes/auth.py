"""Authentication routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse

from ident.application.usecase.auth import (
    AuthResponse,
    GetMeRequest,
    GetMeResponse,
    GetMeUseCase,
    HandleOAuthCallbackRequest,
    HandleOAuthCallbackUseCase,
    LoginLocalRequest,
    LoginLocalUseCase,
    LogoutRequest,
    LogoutUseCase,
    RegisterLocalUserRequest,
    RegisterLocalUserUseCase,
    StartOAuthRequest,
    StartOAuthUseCase,
)
from ident.config import AuthSettings
from ident.domain.service import TokenService
from ident.interface.api.dependencies import (
    clear_access_token_cookie,
    require_token_payload,
    set_access_token_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


def _auth_json(
    result: AuthResponse, auth_settings: AuthSettings, status_code: int
) -> JSONResponse:
    """Serialize an auth result and attach the token cookie."""
    response = JSONResponse(
        status_code=status_code, content=result.model_dump(mode="json")
    )
    set_access_token_cookie(response, result.access_token, auth_settings.cookie)
    return response


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    request: RegisterLocalUserRequest,
    use_case: FromDishka[RegisterLocalUserUseCase],
    auth_settings: FromDishka[AuthSettings],
) -> JSONResponse:
    """Register with email and password.

    Example:
        POST /auth/register
        {"name": "Ada", "email": "ada@example.com", "password": "correct horse"}

        201 {"user": {...}, "access_token": {"token": "...", "expires_at": "..."}}
    """
    result = await use_case.execute(request)
    return _auth_json(result, auth_settings, status.HTTP_201_CREATED)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginLocalRequest,
    use_case: FromDishka[LoginLocalUseCase],
    auth_settings: FromDishka[AuthSettings],
) -> JSONResponse:
    """Log in with email and password."""
    result = await use_case.execute(request)
    return _auth_json(result, auth_settings, status.HTTP_200_OK)


@router.get("/connect/{provider}", status_code=status.HTTP_302_FOUND)
async def connect(
    provider: str,
    use_case: FromDishka[StartOAuthUseCase],
    redirect_uri: str = Query(min_length=1),
    nonce: bool = False,
) -> RedirectResponse:
    """Start an OAuth login and redirect to the provider.

    Example:
        GET /auth/connect/google?redirect_uri=https://app.example.com/cb

        302 Location: https://accounts.google.com/o/oauth2/v2/auth?...
    """
    logger.info("Starting OAuth login: provider=%s", provider)
    result = await use_case.execute(
        StartOAuthRequest(provider=provider, redirect_uri=redirect_uri, nonce=nonce)
    )
    return RedirectResponse(
        url=result.authorization_url, status_code=status.HTTP_302_FOUND
    )


@router.get("/callback/{provider}", response_model=AuthResponse)
async def callback(
    provider: str,
    use_case: FromDishka[HandleOAuthCallbackUseCase],
    auth_settings: FromDishka[AuthSettings],
    code: str = Query(min_length=1),
    state: str = Query(min_length=1),
) -> JSONResponse:
    """Complete an OAuth login from the provider redirect."""
    logger.info("OAuth callback received: provider=%s", provider)
    result = await use_case.execute(
        HandleOAuthCallbackRequest(provider=provider, code=code, state=state)
    )
    return _auth_json(result, auth_settings, status.HTTP_200_OK)


@router.get("/me", response_model=GetMeResponse)
async def me(
    request: Request,
    use_case: FromDishka[GetMeUseCase],
    token_service: FromDishka[TokenService],
    auth_settings: FromDishka[AuthSettings],
) -> GetMeResponse:
    """Current user, from the bearer header or the token cookie."""
    payload = require_token_payload(request, token_service, auth_settings.cookie)
    return await use_case.execute(GetMeRequest(user_id=payload.sub))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    use_case: FromDishka[LogoutUseCase],
    token_service: FromDishka[TokenService],
    auth_settings: FromDishka[AuthSettings],
) -> Response:
    """Log out by clearing the token cookie.

    The token itself stays valid until it expires.
    """
    payload = require_token_payload(request, token_service, auth_settings.cookie)
    await use_case.execute(LogoutRequest(user_id=payload.sub))

    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_access_token_cookie(response, auth_settings.cookie)
    return response
