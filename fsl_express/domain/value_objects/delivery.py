from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    NO_CHANNEL_CONFIGURED = "no_channel_configured"
    ALL_CHANNELS_FAILED = "all_channels_failed"


@dataclass(frozen=True)
class DeliveryAttempt:
    """One failed readiness check or send, as recorded by the orchestrator."""
    channel_name: str
    kind: str
    detail: str

    def to_dict(self) -> dict:
        return {"channel": self.channel_name, "kind": self.kind, "error": self.detail}


@dataclass(frozen=True)
class DeliverySuccess:
    channel_name: str
    provider_message_id: str
    attempts: tuple[DeliveryAttempt, ...] = ()  # Failures before the winning channel

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class DeliveryFailure:
    kind: FailureKind
    attempts: tuple[DeliveryAttempt, ...] = ()

    @property
    def success(self) -> bool:
        return False

    def summary(self) -> str:
        if self.kind is FailureKind.NO_CHANNEL_CONFIGURED:
            return "No mail channel is configured"
        return "; ".join(f"{a.channel_name}: {a.detail}" for a in self.attempts)


DeliveryOutcome = DeliverySuccess | DeliveryFailure
