"""
FastAPI exception handlers.

Every error leaves the service as

    {"success": false, "message": ..., "error": ..., "hint"?: ...}

with delivery failures also listing their per-channel ``attempts``. Stack
traces and exception text of unexpected errors stay in the logs.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..domain.errors import AppError

logger = structlog.get_logger()


def build_error_response(
    status_code: int,
    message: str,
    error: str,
    hint: str | None = None,
    extra: dict[str, Any] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "message": message, "error": error}
    if hint:
        body["hint"] = hint
    if extra:
        body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "Request failed",
            error_code=exc.error_code,
            message=exc.message,
            error=exc.error,
            status_code=exc.status_code,
        )
        extra = {"attempts": exc.details["attempts"]} if "attempts" in exc.details else None
        return build_error_response(exc.status_code, exc.message, exc.error, exc.hint, extra)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.warning("Malformed request", fields=fields)
        return build_error_response(400, "Invalid request", f"Malformed fields: {', '.join(fields)}")

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled exception", error_type=type(exc).__name__, exc_info=exc)
        error = str(exc) if debug else "Internal server error"
        return build_error_response(500, "Internal server error", error)
