"""
Process-wide cache of loaded classifiers.

Each known model name is loaded at most once. Concurrent first requests for
the same name wait on a per-name lock and share the single load; names outside
the registry are rejected before any cache state is touched.
"""

import asyncio
import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import numpy as np
import structlog

from ...domain.errors import ModelNotFound
from .onnx_runner import OnnxRunner

logger = structlog.get_logger()


class ModelRunner(Protocol):
    def run(self, batch: np.ndarray) -> np.ndarray: ...


@dataclass(frozen=True)
class ModelSpec:
    """Where a named model's weights and label metadata live."""
    name: str
    model_path: Path
    labels_path: Path


@dataclass(frozen=True)
class LoadedModel:
    name: str
    runner: ModelRunner
    labels: tuple[str, ...] = ()


def build_model_specs(models_dir: str | Path, names: Iterable[str]) -> dict[str, ModelSpec]:
    """Registry of ``<models_dir>/<name>/model.onnx`` + ``metadata.json``."""
    root = Path(models_dir)
    return {
        name: ModelSpec(
            name=name,
            model_path=root / name / "model.onnx",
            labels_path=root / name / "metadata.json",
        )
        for name in names
    }


def load_labels(path: Path) -> tuple[str, ...]:
    """Read the ``labels`` list from a metadata file; missing file means no labels."""
    if not path.exists():
        return ()
    with path.open("r", encoding="utf-8") as f:
        metadata = json.load(f)
    labels = metadata.get("labels") if isinstance(metadata, dict) else None
    if not isinstance(labels, list):
        return ()
    return tuple(str(label) for label in labels)


def load_onnx_model(spec: ModelSpec) -> LoadedModel:
    runner = OnnxRunner.from_path(spec.model_path)
    return LoadedModel(name=spec.name, runner=runner, labels=load_labels(spec.labels_path))


class ModelCache:
    """Load-once cache keyed by model name."""

    def __init__(
        self,
        specs: Mapping[str, ModelSpec],
        loader: Callable[[ModelSpec], LoadedModel] = load_onnx_model,
    ) -> None:
        self._specs = dict(specs)
        self._loader = loader
        self._entries: dict[str, LoadedModel] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def names(self) -> list[str]:
        return list(self._specs)

    def is_loaded(self, name: str) -> bool:
        return name in self._entries

    async def get(self, name: str) -> LoadedModel:
        """
        Return the loaded model, loading it on first use.

        Raises:
            ModelNotFound: Unknown name, or the model files could not be loaded.
                A failed load is not cached; the next request retries it.
        """
        spec = self._specs.get(name)
        if spec is None:
            raise ModelNotFound(name)

        entry = self._entries.get(name)
        if entry is not None:
            return entry

        lock = self._locks.setdefault(name, asyncio.Lock())
        async with lock:
            entry = self._entries.get(name)
            if entry is None:
                try:
                    entry = await asyncio.to_thread(self._loader, spec)
                except Exception as e:
                    logger.error("Failed to load model", model=name, error=str(e), exc_info=True)
                    raise ModelNotFound(name, reason=f"Model '{name}' could not be loaded") from e
                self._entries[name] = entry
                logger.info("Model loaded", model=name, labels=len(entry.labels))
        return entry

    async def preload(self) -> None:
        """Load every registered model; failures are logged and retried on demand."""
        for name in self._specs:
            try:
                await self.get(name)
            except ModelNotFound:
                logger.warning("Model not preloaded", model=name)
