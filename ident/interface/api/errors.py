"""Exception handlers mapping errors to HTTP responses.

Every error body has the shape ``{"error": {"code": ..., "message": ...}}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ident.adapter.error import ProviderError
from ident.domain.error import (
    AccountAlreadyLinkedError,
    DomainError,
    EmailAlreadyTakenError,
    InvalidCredentialsError,
    InvalidTokenError,
    OAuthProfileEmailRequiredError,
    OAuthStateExpiredError,
    ProviderNotConfiguredError,
    UserNotFoundError,
)
from ident.interface.error import UnauthorizedError

logger = logging.getLogger(__name__)

DOMAIN_STATUS: list[tuple[type[DomainError], int]] = [
    (EmailAlreadyTakenError, status.HTTP_409_CONFLICT),
    (AccountAlreadyLinkedError, status.HTTP_409_CONFLICT),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (OAuthStateExpiredError, status.HTTP_400_BAD_REQUEST),
    (OAuthProfileEmailRequiredError, status.HTTP_400_BAD_REQUEST),
    (ProviderNotConfiguredError, status.HTTP_400_BAD_REQUEST),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND),
]


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build the JSON error body."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def resolve_domain_status(error: DomainError) -> int:
    """HTTP status for a domain error; unmapped ones are client errors."""
    for error_type, status_code in DOMAIN_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    status_code = resolve_domain_status(exc)
    logger.info(
        "%s %s -> %s (%s)",
        request.method,
        request.url.path,
        status_code,
        type(exc).__name__,
    )
    return error_response(status_code, type(exc).__name__, str(exc))


async def handle_unauthorized(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return error_response(status.HTTP_401_UNAUTHORIZED, "unauthorized", str(exc))


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return error_response(status.HTTP_400_BAD_REQUEST, "validation_error", message)


async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
    message = "; ".join(error["msg"] for error in exc.errors())
    return error_response(status.HTTP_400_BAD_REQUEST, "validation_error", message)


async def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    logger.warning("OAuth provider %s failed: %s", exc.provider, exc)
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        "provider_error",
        "Identity provider request failed",
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_server_error",
        "Unexpected error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on the application."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(UnauthorizedError, handle_unauthorized)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(ValidationError, handle_validation)
    app.add_exception_handler(ProviderError, handle_provider_error)
    app.add_exception_handler(Exception, handle_unexpected)
