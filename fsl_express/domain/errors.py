"""
Exception hierarchy shared by services and the HTTP layer.

Every error raised to the gateway derives from ``AppError`` and carries the
HTTP status it maps to, a stable ``error_code`` and an optional remediation
``hint``. Per-channel delivery failures are *not* in this hierarchy: they are
``ChannelError`` (see ``domain.ports.notification_channel``) and stay inside
the orchestrator.
"""

from typing import Any


class AppError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        error: str | None = None,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error = error or message
        self.hint = hint
        self.details = details or {}


class ValidationError(AppError):
    """Missing or malformed request fields."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class ModelNotFound(AppError):
    """Unknown classifier name, or its files could not be loaded."""

    status_code = 400
    error_code = "MODEL_NOT_FOUND"

    def __init__(self, model_name: str, reason: str | None = None) -> None:
        super().__init__(
            "Invalid model",
            error=reason or f"Unknown model '{model_name}'",
            details={"model": model_name},
        )


class DecodeError(AppError):
    """Uploaded bytes are not a decodable image."""

    status_code = 400
    error_code = "DECODE_ERROR"


class UpstreamAuthError(AppError):
    """An upstream provider rejected our credentials."""

    status_code = 500
    error_code = "UPSTREAM_AUTH_ERROR"


class UpstreamTimeout(AppError):
    """An upstream provider did not answer in time."""

    status_code = 500
    error_code = "UPSTREAM_TIMEOUT"


class UpstreamUnavailable(AppError):
    """Network or server failure talking to an upstream provider."""

    status_code = 500
    error_code = "UPSTREAM_UNAVAILABLE"


class NoChannelConfigured(AppError):
    """No mail channel has usable credentials."""

    status_code = 500
    error_code = "NO_CHANNEL_CONFIGURED"


class AllChannelsFailed(AppError):
    """Every configured mail channel was attempted and failed."""

    status_code = 500
    error_code = "ALL_CHANNELS_FAILED"


class PredictionError(AppError):
    """The forward pass itself failed."""

    status_code = 500
    error_code = "PREDICTION_FAILED"
