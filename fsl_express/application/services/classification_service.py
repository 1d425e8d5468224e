import asyncio
from collections.abc import Sequence

import numpy as np
import structlog

from ...domain.errors import PredictionError
from ...domain.value_objects import ClassificationResult
from ...infrastructure.ml import LoadedModel, ModelCache, decode_image, to_batch

logger = structlog.get_logger()


def top_label(scores: np.ndarray, labels: Sequence[str]) -> ClassificationResult:
    """Arg-max over the raw output; ties resolve to the lowest index."""
    values = np.asarray(scores, dtype=np.float64).reshape(-1)
    if values.size == 0:
        raise PredictionError("Prediction failed", error="Model returned no scores")

    index = int(np.argmax(values))
    label = labels[index] if index < len(labels) and labels[index] else f"Class {index}"
    return ClassificationResult(label=label, confidence=float(values[index]))


def _preprocess(image_bytes: bytes) -> np.ndarray:
    return to_batch(decode_image(image_bytes))


class ClassificationService:
    """Runs one image through a named classifier."""

    def __init__(self, cache: ModelCache) -> None:
        self._cache = cache

    async def load(self, model_name: str) -> LoadedModel:
        """Resolve a model, raising ModelNotFound for unknown names."""
        return await self._cache.get(model_name)

    async def classify(self, model_name: str, image_bytes: bytes) -> ClassificationResult:
        model = await self.load(model_name)
        batch = await asyncio.to_thread(_preprocess, image_bytes)

        try:
            scores = await asyncio.to_thread(model.runner.run, batch)
        except Exception as e:
            logger.error("Prediction error", model=model_name, error=str(e), exc_info=True)
            raise PredictionError("Prediction failed", error=str(e)) from e

        result = top_label(scores, model.labels)
        logger.info(
            "Prediction completed",
            model=model_name,
            label=result.label,
            confidence=result.confidence_percent,
        )
        return result
