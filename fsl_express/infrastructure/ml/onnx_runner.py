"""ONNX Runtime helpers."""

from pathlib import Path

import numpy as np
import onnxruntime as ort


def _pick_providers(prefer_cuda: bool = False) -> list[str]:
    available = ort.get_available_providers()
    if prefer_cuda and "CUDAExecutionProvider" in available:
        return ["CUDAExecutionProvider", "CPUExecutionProvider"]
    return ["CPUExecutionProvider"]


class OnnxRunner:
    """
    Runs one batch through an ONNX session.

    Batches arrive channels-last (N, H, W, 3). Models exported channels-first
    (N, 3, H, W) are detected from the declared input shape and fed a
    transposed batch.
    """

    def __init__(self, session) -> None:
        self.session = session
        model_input = session.get_inputs()[0]
        self.input_name = model_input.name
        self.output_name = session.get_outputs()[0].name
        shape = getattr(model_input, "shape", None) or []
        self.channels_first = len(shape) == 4 and shape[1] == 3

    @classmethod
    def from_path(cls, onnx_path: Path, prefer_cuda: bool = False) -> "OnnxRunner":
        if not onnx_path.exists():
            raise FileNotFoundError(f"Missing ONNX model: {onnx_path}")
        session = ort.InferenceSession(str(onnx_path), providers=_pick_providers(prefer_cuda))
        return cls(session)

    def run(self, batch: np.ndarray) -> np.ndarray:
        if batch.dtype != np.float32:
            batch = batch.astype(np.float32)
        if self.channels_first:
            batch = np.transpose(batch, (0, 3, 1, 2))
        outputs = self.session.run([self.output_name], {self.input_name: batch})
        return outputs[0]
