"""
Access logging middleware.

Provides request/response logging and timing.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses.

    Logs:
    - Request method and path
    - Response status code
    - Request duration
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, "request_id", None)

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Error processing request: {request.method} {request.url.path} "
                f"({duration_ms:.2f}ms): {e}",
                exc_info=True,
                extra={"request_id": request_id},
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.2f}ms)",
            extra={"request_id": request_id, "duration_ms": round(duration_ms, 2)},
        )
        response.headers["X-Process-Time"] = f"{duration_ms:.2f}ms"

        return response
