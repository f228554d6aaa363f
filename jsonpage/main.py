"""
Main FastAPI application for the JSON page server.

Serves HTML pages rendered from ordered JSON documents.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from jsonpage.middleware import error_handling
from jsonpage.middleware.logging import LoggingMiddleware
from jsonpage.middleware.request_id import RequestIDMiddleware
from jsonpage.observability.logging import configure_logging
from jsonpage.services.page_service import PageService
from jsonpage.settings import Settings, get_settings
from jsonpage.web import routes as page_routes


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    page_service: Optional[PageService] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use (defaults to environment settings)
        page_service: Preconstructed service (tests); built from settings otherwise

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    configure_logging(
        log_format=settings.log_format,
        log_level=settings.log_level,
        logger_name="jsonpage",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} on http://{settings.host}:{settings.port}")
        if settings.ai_design:
            logger.info("AI design mode: ENABLED")
        yield
        logger.info(f"Shutting down {settings.app_name}")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.page_service = page_service or PageService(settings)

    # ========================================================================
    # MIDDLEWARE (last added = first executed)
    # ========================================================================

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    error_handling.add_exception_handlers(app)

    # ========================================================================
    # ROUTES
    # ========================================================================

    app.include_router(page_routes.router)
    app.mount(
        "/static",
        StaticFiles(directory=settings.static_dir, check_dir=False),
        name="static",
    )

    return app
