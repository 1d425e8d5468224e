"""
Multi-channel mail delivery with ordered fallback.

The orchestrator walks the configured channels strictly in order and stops at
the first successful send:

    PENDING -> TRYING(i) -> SUCCEEDED
                         -> TRYING(i+1) -> ... -> EXHAUSTED

Each active channel gets at most one readiness check and one send per call,
each bounded by that channel's own timeout. Channels are never tried
concurrently: a slow but eventually successful provider must not race a second
provider into sending the same message twice.

A timed-out operation is cancelled on our side only. The provider may still
complete the delivery after we have moved on to the next channel.
"""

import asyncio
from collections.abc import Awaitable, Sequence
from enum import Enum
from typing import TypeVar

import structlog

from ...domain.ports import ChannelError, ErrorKind, NotificationChannel
from ...domain.value_objects import (
    DeliveryAttempt,
    DeliveryFailure,
    DeliveryOutcome,
    DeliverySuccess,
    FailureKind,
    OutgoingMessage,
)
from ...infrastructure.logging import Timer

logger = structlog.get_logger()

T = TypeVar("T")


class DeliveryState(str, Enum):
    PENDING = "pending"
    TRYING = "trying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


async def run_bounded(operation: Awaitable[T], timeout: float, label: str) -> T:
    """
    Await ``operation`` for at most ``timeout`` seconds.

    Any failure comes back as ChannelError so the caller can record it
    and move on.
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ChannelError(ErrorKind.TIMEOUT, f"{label} timed out after {timeout:g}s") from e
    except ChannelError:
        raise
    except Exception as e:
        raise ChannelError(ErrorKind.UNAVAILABLE, f"{label} failed: {e or type(e).__name__}") from e


class DeliveryOrchestrator:
    """Delivers one message through the first channel that accepts it."""

    def __init__(self, channels: Sequence[NotificationChannel]) -> None:
        self._channels = tuple(channels)

    @property
    def channels(self) -> tuple[NotificationChannel, ...]:
        return self._channels

    def active_channel_names(self) -> list[str]:
        return [c.name for c in self._channels if c.is_active()]

    async def deliver(self, message: OutgoingMessage) -> DeliveryOutcome:
        """
        Try each active channel in order until one sends the message.

        Args:
            message: Message to deliver; channels receive it unchanged

        Returns:
            DeliverySuccess naming the channel that sent the message, or
            DeliveryFailure listing every attempted channel's error
        """
        state = DeliveryState.PENDING
        attempts: list[DeliveryAttempt] = []
        tried = 0

        for position, channel in enumerate(self._channels):
            if not channel.is_active():
                logger.debug("Skipping inactive channel", channel=channel.name)
                continue

            state = DeliveryState.TRYING
            tried += 1
            log = logger.bind(channel=channel.name, position=position)
            log.info("Delivery state changed", state=state.value)

            with Timer() as t:
                try:
                    await run_bounded(
                        channel.check_ready(), channel.ready_timeout, "Readiness check"
                    )
                    message_id = await run_bounded(
                        channel.send(message), channel.send_timeout, "Send"
                    )
                    if not message_id:
                        raise ChannelError(ErrorKind.UNAVAILABLE, "Provider returned no message ID")
                except ChannelError as e:
                    attempts.append(DeliveryAttempt(channel.name, e.kind.value, e.detail))
                    log.warning(
                        "Channel attempt failed",
                        kind=e.kind.value,
                        error=e.detail,
                        duration_ms=t.duration_ms,
                    )
                    continue

            state = DeliveryState.SUCCEEDED
            log.info(
                "Delivery state changed",
                state=state.value,
                message_id=message_id,
                failed_before=len(attempts),
                duration_ms=t.duration_ms,
            )
            return DeliverySuccess(channel.name, message_id, tuple(attempts))

        state = DeliveryState.EXHAUSTED
        if tried == 0:
            logger.error("No mail channel configured", state=state.value)
            return DeliveryFailure(FailureKind.NO_CHANNEL_CONFIGURED)

        logger.error(
            "All mail channels failed",
            state=state.value,
            attempts=[a.to_dict() for a in attempts],
        )
        return DeliveryFailure(FailureKind.ALL_CHANNELS_FAILED, tuple(attempts))
