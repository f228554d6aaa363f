"""
Request ID Middleware.

Generates/extracts a unique identifier for request tracing.
"""

from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to generate/extract request IDs.

    Headers:
    - X-Request-ID: Client can provide, or we generate

    Stored in request.state.request_id as a string for downstream use
    and echoed back on the response.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid4().hex

        request.state.request_id = request_id

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id

        return response
