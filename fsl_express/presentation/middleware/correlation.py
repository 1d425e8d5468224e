"""
Per-request correlation IDs.

A caller-supplied ``X-Request-ID`` is reused only when it is a short token of
safe characters; anything else is replaced by a fresh UUID so that raw header
text never reaches the JSON logs. The ID is echoed on the response.
"""

import re
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...infrastructure.logging import Timer, set_correlation_id

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(request: Request) -> str:
    for header in (REQUEST_ID_HEADER, "X-Correlation-ID"):
        candidate = request.headers.get(header, "").strip()
        if _SAFE_REQUEST_ID.match(candidate):
            return candidate
    return uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = resolve_request_id(request)
        set_correlation_id(request_id)

        with structlog.contextvars.bound_contextvars(
            correlation_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            with Timer() as t:
                response = await call_next(request)

            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "Request handled",
                status_code=response.status_code,
                duration_ms=t.duration_ms,
                client_ip=request.client.host if request.client else None,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
