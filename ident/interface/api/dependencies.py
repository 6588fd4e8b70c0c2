"""Request helpers for bearer credentials and the token cookie."""

from fastapi import Request, Response

from ident.application.usecase.auth import AccessTokenInfo
from ident.config import CookieSettings
from ident.domain.error import InvalidTokenError
from ident.domain.service import TokenPayload, TokenService
from ident.interface.error import UnauthorizedError


def get_token_from_request(request: Request, cookie_name: str) -> str | None:
    """Bearer token from the Authorization header, else the cookie."""
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        token = authorization[len("Bearer ") :].strip()
        if token:
            return token

    cookie = request.cookies.get(cookie_name, "").strip()
    return cookie or None


def require_token_payload(
    request: Request, token_service: TokenService, cookie: CookieSettings
) -> TokenPayload:
    """Verify the request's access token.

    Raises:
        UnauthorizedError: If no token is present, or it does not verify
    """
    token = get_token_from_request(request, cookie.name)
    if not token:
        raise UnauthorizedError("Missing access token")

    try:
        return token_service.verify(token)
    except InvalidTokenError:
        raise UnauthorizedError("Invalid or expired access token") from None


def set_access_token_cookie(
    response: Response, access_token: AccessTokenInfo, cookie: CookieSettings
) -> None:
    """Set the HTTP-only access token cookie, expiring with the token."""
    response.set_cookie(
        key=cookie.name,
        value=access_token.token,
        expires=access_token.expires_at,
        path=cookie.path,
        domain=cookie.domain,
        secure=cookie.secure,
        httponly=True,
        samesite=cookie.samesite,
    )


def clear_access_token_cookie(response: Response, cookie: CookieSettings) -> None:
    """Expire the access token cookie."""
    response.delete_cookie(
        key=cookie.name,
        path=cookie.path,
        domain=cookie.domain,
        secure=cookie.secure,
        httponly=True,
        samesite=cookie.samesite,
    )
