"""Image decoding and batching for classifier input."""

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from ...domain.errors import DecodeError

INPUT_SIZE = 224


def decode_image(image_bytes: bytes) -> Image.Image:
    """Decode uploaded bytes as a 3-channel RGB image."""
    if not image_bytes:
        raise DecodeError("Invalid image", error="Uploaded image is empty")
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError("Invalid image", error=f"Could not decode image: {e}") from e
    if img.mode != "RGB":
        img = img.convert("RGB")
    return img


def to_batch(img: Image.Image, size: int = INPUT_SIZE) -> np.ndarray:
    """Nearest-neighbour resize to size x size, scale to [0, 1], add batch axis."""
    resized = img.resize((size, size), resample=Image.Resampling.NEAREST)
    arr = np.asarray(resized, dtype=np.float32) / 255.0
    return arr[np.newaxis, ...]
