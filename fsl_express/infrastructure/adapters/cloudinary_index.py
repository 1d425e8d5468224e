from typing import Any

import httpx
import structlog

from ...config import is_configured
from ...domain.errors import UpstreamAuthError, UpstreamTimeout, UpstreamUnavailable
from ...domain.ports import AssetIndex

logger = structlog.get_logger()

FETCH_ERROR = "Error fetching Cloudinary data"
CREDENTIALS_HINT = "Check CLOUD_NAME/CLOUDINARY_API_KEY/CLOUDINARY_API_SECRET."


class CloudinaryAssetIndex(AssetIndex):
    """Cloudinary Admin search API, authenticated with key/secret."""

    BASE_URL = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        timeout: float = 15.0,
        base_url: str = BASE_URL,
    ) -> None:
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")

    def is_configured(self) -> bool:
        return all(is_configured(v) for v in (self._cloud_name, self._api_key, self._api_secret))

    async def list_folder(self, folder: str, max_results: int) -> list[dict[str, Any]]:
        if not self.is_configured():
            raise UpstreamAuthError(
                FETCH_ERROR,
                error="Cloudinary credentials are not configured",
                hint=CREDENTIALS_HINT,
            )

        url = f"{self._base_url}/{self._cloud_name}/resources/search"
        params = {"expression": f"folder:{folder}", "max_results": max_results}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    url,
                    auth=(self._api_key, self._api_secret),
                    params=params,
                )
        except httpx.TimeoutException as e:
            logger.error("Cloudinary request timed out", error=str(e))
            raise UpstreamTimeout(FETCH_ERROR, error=f"Cloudinary timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error("Cloudinary request failed", error=str(e))
            raise UpstreamUnavailable(FETCH_ERROR, error=f"Cloudinary unreachable: {e}") from e

        if response.status_code in (401, 403):
            logger.error("Cloudinary rejected credentials", status_code=response.status_code)
            raise UpstreamAuthError(
                FETCH_ERROR,
                error=f"Cloudinary API error: {response.status_code}",
                hint=CREDENTIALS_HINT,
            )
        if response.is_error:
            logger.error("Cloudinary API error", status_code=response.status_code)
            raise UpstreamUnavailable(
                FETCH_ERROR,
                error=f"Cloudinary API error: {response.status_code}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(FETCH_ERROR, error="Cloudinary returned invalid JSON") from e

        return data.get("resources") or []
