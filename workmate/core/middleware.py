"""Custom middleware for security headers and request time limits."""

import asyncio

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from workmate.core.errors import error_response

logger = structlog.get_logger()

TIMEOUT_MESSAGE = "Request timed out, please retry"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: The API is never framed
    - Referrer-Policy: Controls referrer information sent with requests
    - Content-Security-Policy: JSON-only API, nothing to load
    - Strict-Transport-Security: Forces HTTPS (when enabled)
    """

    def __init__(
        self,
        app: object,
        enable_hsts: bool = False,
        hsts_max_age: int = 31536000,  # 1 year
    ) -> None:
        super().__init__(app)
        self.enable_hsts = enable_hsts
        self.hsts_max_age = hsts_max_age

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )

        # HSTS - only enable in production with HTTPS
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.hsts_max_age}; includeSubDomains"
            )

        return response


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Bound the total handling time of a request.

    When the budget runs out the handler is cancelled, which rolls back its
    open transaction, and the client gets a 503.
    """

    def __init__(self, app: object, timeout_seconds: float = 10.0) -> None:
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out",
                timeout_seconds=self.timeout_seconds,
            )
            return error_response(503, TIMEOUT_MESSAGE)
