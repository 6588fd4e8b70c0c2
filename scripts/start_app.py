#!/usr/bin/env python3
"""Start the identity API with Logfire error tracking for startup errors."""

import sys

import logfire
import uvicorn

from ident.config import Settings
from ident.util.logging import setup_logging
from ident.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early so a failing factory is still reported
    configure_logfire(settings)
    setup_logging(settings)

    try:
        logfire.info(
            "Starting identity API",
            host=settings.host,
            port=settings.port,
            git_sha=settings.git_sha,
        )

        uvicorn.run(
            "ident.interface.api.app:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level="debug" if settings.debug else "info",
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
