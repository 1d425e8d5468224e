from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .infrastructure.logging import configure_logging, sanitize_for_logging
from .presentation.api.dependencies import get_model_cache, get_orchestrator
from .presentation.api.v1 import health, otp, predict, search
from .presentation.errors import register_error_handlers
from .presentation.middleware import (
    CorrelationIdMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

configure_logging(settings.service_name, debug=settings.smtp_debug or settings.debug)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    orchestrator = get_orchestrator()
    model_cache = get_model_cache()
    logger.info(
        "Starting application",
        service=settings.service_name,
        port=settings.port,
        mail_channels=[c.name for c in orchestrator.channels],
        active_mail_channels=orchestrator.active_channel_names(),
        smtp_user_len=len(settings.smtp_user),
        smtp_pass_len=len(settings.smtp_pass),
        from_email=sanitize_for_logging(settings.from_email) or "(not set, will use SMTP_USER)",
        classifier_models=model_cache.names,
    )
    if not orchestrator.active_channel_names():
        logger.warning("No mail channel configured; /send-otp will fail")

    if settings.preload_models:
        await model_cache.preload()

    yield

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="FSL Express Backend",
        description="Sign asset search, OTP email delivery and sign image classification",
        version=settings.service_version,
        lifespan=lifespan,
    )

    register_error_handlers(app, debug=settings.debug)

    # First added = last executed
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_upload_bytes)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(otp.router)
    app.include_router(predict.router)
    return app


app = create_app()
