"""
Factory for the ordered mail channel list.

Builds every channel named in ``email_channel_order`` from settings, in that
order. The resulting tuple is created once at startup and shared read-only.
"""

import structlog

from ...channels import BrevoApiChannel, SesChannel, SimulatedChannel, SmtpChannel
from ...config import Settings
from ...domain.ports import NotificationChannel

logger = structlog.get_logger()


def _create_channel(name: str, settings: Settings) -> NotificationChannel:
    timeouts = {
        "ready_timeout": settings.mail_ready_timeout_seconds,
        "send_timeout": settings.mail_send_timeout_seconds,
    }
    match name:
        case "brevo_smtp":
            return SmtpChannel(
                name,
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_user,
                password=settings.smtp_pass,
                **timeouts,
            )
        case "brevo_api":
            return BrevoApiChannel(
                api_key=settings.brevo_api_key,
                sender_email=settings.sender_email,
                name=name,
                base_url=settings.brevo_base_url,
                **timeouts,
            )
        case "gmail_smtp":
            return SmtpChannel(
                name,
                host=settings.gmail_smtp_host,
                port=settings.gmail_smtp_port,
                username=settings.gmail_user,
                password=settings.gmail_app_password,
                send_as_account=True,
                **timeouts,
            )
        case "ses":
            return SesChannel(
                sender_email=settings.ses_sender_email,
                region=settings.aws_region,
                name=name,
                **timeouts,
            )
        case "simulated":
            return SimulatedChannel(name)
        case _:
            raise ValueError(f"Unsupported mail channel: {name}")


def build_channels(settings: Settings) -> tuple[NotificationChannel, ...]:
    """Create the configured channels in priority order."""
    channels: list[NotificationChannel] = []
    for name in settings.email_channel_order:
        try:
            channels.append(_create_channel(name.strip().lower(), settings))
        except ValueError:
            logger.warning("Unknown mail channel in configuration", channel=name)

    if settings.email_simulation and not any(isinstance(c, SimulatedChannel) for c in channels):
        channels.append(SimulatedChannel())

    return tuple(channels)
