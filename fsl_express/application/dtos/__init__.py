from .api_dto import (
    AssetFileDTO,
    PredictionResponse,
    SearchResponse,
    SendOtpRequest,
    SendOtpResponse,
)

__all__ = [
    "AssetFileDTO",
    "PredictionResponse",
    "SearchResponse",
    "SendOtpRequest",
    "SendOtpResponse",
]
