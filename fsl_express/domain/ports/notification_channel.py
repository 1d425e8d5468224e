"""
Outbound port for mail delivery.

This is the interface the delivery orchestrator uses to reach a provider.
Infrastructure adapters (SMTP relays, HTTP mail APIs, SES) implement it.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ..value_objects import OutgoingMessage


class ErrorKind(str, Enum):
    """Why a single channel operation failed."""

    AUTH = "auth"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    REJECTED = "rejected"


class ChannelError(Exception):
    """Failure of one readiness check or send on one channel."""

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


class NotificationChannel(ABC):
    """
    Outbound port for sending one email through one provider.

    Channels are built once at startup from settings and shared read-only
    across requests. Timeouts are declared here and enforced by the caller.
    """

    def __init__(
        self,
        name: str,
        ready_timeout: float = 10.0,
        send_timeout: float = 15.0,
    ) -> None:
        self._name = name
        self._ready_timeout = ready_timeout
        self._send_timeout = send_timeout

    @property
    def name(self) -> str:
        return self._name

    @property
    def ready_timeout(self) -> float:
        return self._ready_timeout

    @property
    def send_timeout(self) -> float:
        return self._send_timeout

    @abstractmethod
    def is_active(self) -> bool:
        """
        Return whether this channel's credentials are usable.

        Must not raise: missing or placeholder credentials yield False.
        """
        ...

    @abstractmethod
    async def check_ready(self) -> None:
        """
        Perform a lightweight handshake with the provider.

        Raises:
            ChannelError: If the provider cannot be reached or rejects us
        """
        ...

    @abstractmethod
    async def send(self, message: OutgoingMessage) -> str:
        """
        Deliver a message.

        Args:
            message: Message to deliver; never mutated

        Returns:
            Provider-assigned message ID (diagnostics only)

        Raises:
            ChannelError: If delivery fails
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r})"
