"""
Global exception handlers.

Error bodies are short plain-text messages; exception details (paths,
parser positions, stack traces) go to the log only.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from jsonpage.errors import (
    DocumentDecodeError,
    DocumentNotFoundError,
    DocumentReadError,
    JsonPageError,
    RenderTimeoutError,
)


logger = logging.getLogger(__name__)


# Exception type -> (status code, public message)
ERROR_RESPONSES = {
    DocumentNotFoundError: (status.HTTP_404_NOT_FOUND, "Not Found"),
    DocumentDecodeError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Document could not be parsed"),
    DocumentReadError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Document could not be read"),
    RenderTimeoutError: (status.HTTP_504_GATEWAY_TIMEOUT, "Page rendering timed out"),
}


def _error_response(request: Request, status_code: int, message: str) -> PlainTextResponse:
    request_id = getattr(request.state, "request_id", None)
    body = message if request_id is None else f"{message} (request {request_id})"
    return PlainTextResponse(body, status_code=status_code)


def add_exception_handlers(app: FastAPI):
    """Add global exception handlers to FastAPI app."""

    @app.exception_handler(JsonPageError)
    async def page_exception_handler(request: Request, exc: JsonPageError):
        """Map domain errors to sanitized responses."""
        for exc_type, (status_code, message) in ERROR_RESPONSES.items():
            if isinstance(exc, exc_type):
                break
        else:
            status_code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, "Page could not be rendered"

        log = logger.warning if status_code < 500 else logger.error
        log(
            f"{type(exc).__name__} on {request.url.path}: {exc}",
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        return _error_response(request, status_code, message)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred",
        )
