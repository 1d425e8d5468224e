from .asset_lookup_service import AssetLookupService, asset_stem, normalize_query
from .classification_service import ClassificationService, top_label
from .delivery_orchestrator import DeliveryOrchestrator, DeliveryState, run_bounded
from .otp_service import OtpService, remediation_hint

__all__ = [
    "AssetLookupService",
    "ClassificationService",
    "DeliveryOrchestrator",
    "DeliveryState",
    "OtpService",
    "asset_stem",
    "normalize_query",
    "remediation_hint",
    "run_bounded",
    "top_label",
]
