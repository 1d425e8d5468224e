from fastapi import APIRouter, Depends, File, UploadFile

from ....application.dtos import PredictionResponse
from ....application.services import ClassificationService
from ....domain.errors import ValidationError
from ..dependencies import get_classification_service

router = APIRouter(tags=["predict"])


@router.post(
    "/predict/{model}",
    response_model=PredictionResponse,
    summary="Classify a sign image",
)
async def predict(
    model: str,
    image: UploadFile | None = File(default=None),
    service: ClassificationService = Depends(get_classification_service),
) -> PredictionResponse:
    """Top label and confidence for one uploaded image."""
    # Model is resolved first so an unknown name wins over a missing upload
    await service.load(model)
    if image is None:
        raise ValidationError("No image uploaded")

    contents = await image.read()
    result = await service.classify(model, contents)
    return PredictionResponse.from_result(result)
