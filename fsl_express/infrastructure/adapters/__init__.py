from .channel_factory import build_channels
from .cloudinary_index import CloudinaryAssetIndex

__all__ = [
    "CloudinaryAssetIndex",
    "build_channels",
]
