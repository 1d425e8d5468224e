from fastapi import Depends

from ...application.services import (
    AssetLookupService,
    ClassificationService,
    DeliveryOrchestrator,
    OtpService,
)
from ...config import settings
from ...infrastructure.adapters import CloudinaryAssetIndex, build_channels
from ...infrastructure.ml import ModelCache, build_model_specs

# Process-wide singletons; channels and the model cache are built once
_orchestrator: DeliveryOrchestrator | None = None
_model_cache: ModelCache | None = None


def get_orchestrator() -> DeliveryOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = DeliveryOrchestrator(build_channels(settings))
    return _orchestrator


def get_model_cache() -> ModelCache:
    global _model_cache
    if _model_cache is None:
        _model_cache = ModelCache(
            build_model_specs(settings.models_dir, settings.classifier_models)
        )
    return _model_cache


def get_otp_service(
    orchestrator: DeliveryOrchestrator = Depends(get_orchestrator),
) -> OtpService:
    return OtpService(
        orchestrator,
        sender_email=settings.sender_email,
        sender_name=settings.from_name,
        default_subject=settings.otp_subject,
    )


def get_asset_lookup_service() -> AssetLookupService:
    index = CloudinaryAssetIndex(
        cloud_name=settings.cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        timeout=settings.cloudinary_timeout_seconds,
    )
    return AssetLookupService(index, folder=settings.cloudinary_folder)


def get_classification_service(
    cache: ModelCache = Depends(get_model_cache),
) -> ClassificationService:
    return ClassificationService(cache)
