from .model_cache import LoadedModel, ModelCache, ModelSpec, build_model_specs, load_onnx_model
from .onnx_runner import OnnxRunner
from .preprocess import INPUT_SIZE, decode_image, to_batch

__all__ = [
    "INPUT_SIZE",
    "LoadedModel",
    "ModelCache",
    "ModelSpec",
    "OnnxRunner",
    "build_model_specs",
    "decode_image",
    "load_onnx_model",
    "to_batch",
]
