from .delivery import (
    DeliveryAttempt,
    DeliveryFailure,
    DeliveryOutcome,
    DeliverySuccess,
    FailureKind,
)
from .message import OutgoingMessage
from .results import AssetFile, AssetMatch, ClassificationResult

__all__ = [
    "AssetFile",
    "AssetMatch",
    "ClassificationResult",
    "DeliveryAttempt",
    "DeliveryFailure",
    "DeliveryOutcome",
    "DeliverySuccess",
    "FailureKind",
    "OutgoingMessage",
]
