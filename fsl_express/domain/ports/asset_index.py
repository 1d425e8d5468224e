"""
Outbound port for the media asset index.

The lookup service depends on this abstraction; the Cloudinary adapter
implements it.
"""

from abc import ABC, abstractmethod
from typing import Any


class AssetIndex(ABC):
    """Read-only listing of assets stored under a folder."""

    @abstractmethod
    async def list_folder(self, folder: str, max_results: int) -> list[dict[str, Any]]:
        """
        List assets in upstream order.

        Each item carries at least ``public_id`` and ``secure_url``.

        Raises:
            UpstreamAuthError: If the index rejects our credentials
            UpstreamUnavailable: On network or server failure
        """
        ...
