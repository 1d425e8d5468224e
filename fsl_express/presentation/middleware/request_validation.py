"""Request size limits and security headers."""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = structlog.get_logger()

MAX_REQUEST_SIZE = 10 * 1024 * 1024  # Image uploads


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose declared Content-Length exceeds the limit."""

    def __init__(self, app, max_size: int = MAX_REQUEST_SIZE) -> None:
        super().__init__(app)
        self._max_size = max_size

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")

        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                logger.warning(
                    "Invalid Content-Length header",
                    content_length=content_length,
                    path=request.url.path,
                )
                size = 0

            if size > self._max_size:
                logger.warning(
                    "Request rejected: payload too large",
                    content_length=size,
                    max_size=self._max_size,
                    path=request.url.path,
                )
                # Raised exceptions bypass FastAPI handlers inside middleware
                return JSONResponse(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    content={
                        "success": False,
                        "message": "Request body too large",
                        "error": f"Maximum size: {self._max_size} bytes",
                    },
                )

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds browser hardening headers to every response."""

    CSP_API = "; ".join([
        "default-src 'none'",
        "frame-ancestors 'none'",
        "base-uri 'none'",
        "form-action 'none'",
    ])

    # Swagger UI loads its assets from jsDelivr
    CSP_DOCS = "; ".join([
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "img-src 'self' data: https://cdn.jsdelivr.net https://fastapi.tiangolo.com",
        "frame-ancestors 'none'",
    ])

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if self._is_docs_path(request.url.path):
            response.headers["Content-Security-Policy"] = self.CSP_DOCS
        else:
            response.headers["Content-Security-Policy"] = self.CSP_API

        # OTP and search responses must not be cached by intermediaries
        if request.url.path.startswith(("/api/", "/send-otp")):
            response.headers["Cache-Control"] = "no-store"

        return response

    def _is_docs_path(self, path: str) -> bool:
        return path in {"/docs", "/redoc", "/openapi.json"} or path.startswith("/docs")
