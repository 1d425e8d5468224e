"""
Application service for one-time-passcode emails.

Validates the request, renders the message and hands it to the delivery
orchestrator. Delivery failures are turned into AppErrors carrying a
best-effort remediation hint.
"""

import html
import re

import structlog

from ...domain.errors import AllChannelsFailed, NoChannelConfigured, ValidationError
from ...domain.ports import ErrorKind
from ...domain.value_objects import (
    DeliveryFailure,
    DeliverySuccess,
    FailureKind,
    OutgoingMessage,
)
from .delivery_orchestrator import DeliveryOrchestrator

logger = structlog.get_logger()

AUTH_HINT = "Check SMTP_USER/SMTP_PASS."
SENDER_HINT = "Use a Brevo-verified FROM_EMAIL."
NO_CHANNEL_HINT = (
    "Configure at least one mail channel: SMTP_USER/SMTP_PASS, BREVO_API_KEY with FROM_EMAIL, "
    "GMAIL_USER/GMAIL_APP_PASSWORD or SES_SENDER_EMAIL."
)

_AUTH_PATTERN = re.compile(r"EAUTH", re.IGNORECASE)
_SENDER_PATTERN = re.compile(r"(sender|from).*(not|allowed|authorized|verif)", re.IGNORECASE)


def remediation_hint(error_text: str) -> str | None:
    """Map provider error text to a configuration hint, if one applies."""
    if _AUTH_PATTERN.search(error_text):
        return AUTH_HINT
    if _SENDER_PATTERN.search(error_text):
        return SENDER_HINT
    return None


class OtpService:
    """Sends OTP codes by email."""

    def __init__(
        self,
        orchestrator: DeliveryOrchestrator,
        sender_email: str,
        sender_name: str = "FSL Express",
        default_subject: str = "Your OTP Code",
    ) -> None:
        self._orchestrator = orchestrator
        self._sender_email = sender_email
        self._sender_name = sender_name
        self._default_subject = default_subject

    def build_message(self, to: str, otp: str, subject: str | None = None) -> OutgoingMessage:
        code = html.escape(otp)
        return OutgoingMessage(
            recipient=to,
            subject=subject or self._default_subject,
            html_body=f"<p>Your OTP code is: <b>{code}</b></p>",
            text_body=f"Your OTP code is: {otp}",
            sender_email=self._sender_email,
            sender_name=self._sender_name,
        )

    async def send_otp(
        self,
        to: str | None,
        otp: str | int | None,
        subject: str | None = None,
    ) -> DeliverySuccess:
        """
        Send an OTP email.

        Raises:
            ValidationError: If ``to`` or ``otp`` is missing
            NoChannelConfigured: If no channel has usable credentials
            AllChannelsFailed: If every active channel failed
        """
        to = (to or "").strip()
        code = "" if otp is None else str(otp).strip()
        if not to or not code:
            raise ValidationError("Missing 'to' or 'otp'.")

        message = self.build_message(to, code, (subject or "").strip() or None)
        outcome = await self._orchestrator.deliver(message)

        if isinstance(outcome, DeliveryFailure):
            raise self._failure_error(outcome)

        logger.info("OTP sent", channel=outcome.channel_name, message_id=outcome.provider_message_id)
        return outcome

    @staticmethod
    def _failure_error(outcome: DeliveryFailure) -> NoChannelConfigured | AllChannelsFailed:
        if outcome.kind is FailureKind.NO_CHANNEL_CONFIGURED:
            return NoChannelConfigured(
                "Failed to send OTP",
                error=outcome.summary(),
                hint=NO_CHANNEL_HINT,
            )

        hint = None
        for attempt in outcome.attempts:
            hint = remediation_hint(attempt.detail)
            if hint is None and attempt.kind == ErrorKind.AUTH.value:
                hint = f"Check the credentials of mail channel '{attempt.channel_name}'."
            if hint:
                break
        return AllChannelsFailed(
            "Failed to send OTP",
            error=outcome.summary(),
            hint=hint,
            details={"attempts": [a.to_dict() for a in outcome.attempts]},
        )
