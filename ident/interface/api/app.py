"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ident.config import Settings
from ident.interface.api.errors import register_exception_handlers
from ident.interface.api.routes import auth, health, jwks
from ident.util.di.container import create_container, setup_di
from ident.util.observability import instrument_fastapi, instrument_httpx


def create_app(
    settings: Settings | None = None,
    container: AsyncContainer | None = None,
    instrument: bool = True,
) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured before calling this function; start_app.py
    handles this in production. Tests pass their own container and disable
    instrumentation.

    Args:
        settings: Application settings, loaded from environment when omitted
        container: DI container, the production container when omitted
        instrument: Whether to instrument FastAPI and httpx with Logfire
    """
    settings = settings or Settings()

    if instrument:
        instrument_httpx()

    app_instance = FastAPI(
        title="Ident API",
        description="Local credentials, OAuth login and access token issuance",
        version="0.1.0",
    )

    if instrument:
        instrument_fastapi(app_instance)

    if settings.cors.enabled:
        app_instance.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors.origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
            max_age=600,  # Cache preflight requests for 10 minutes
        )

    setup_di(app_instance, container or create_container())
    register_exception_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(jwks.router)
    app_instance.include_router(auth.router)

    return app_instance
