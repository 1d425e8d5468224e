import re

import structlog

from ...domain.ports import AssetIndex
from ...domain.value_objects import AssetFile, AssetMatch

logger = structlog.get_logger()

MAX_RESULTS = 500

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_query(query: str | None) -> str:
    """Lowercase and drop everything outside [a-z0-9]: "Cat 01" -> "cat01"."""
    return _NON_ALNUM.sub("", (query or "").lower())


def asset_stem(public_id: str) -> str:
    """Last path segment up to the first underscore: "signs/cat01_v2" -> "cat01"."""
    return public_id.split("/")[-1].split("_")[0].lower()


class AssetLookupService:
    """Finds the asset whose file stem equals the normalized query."""

    def __init__(self, index: AssetIndex, folder: str) -> None:
        self._index = index
        self._folder = folder

    async def search(self, query: str | None) -> AssetMatch:
        """
        Search the configured folder.

        The first candidate in upstream order wins; there is no ranking.
        The full listing is returned whether or not anything matched.
        """
        normalized = normalize_query(query)
        resources = await self._index.list_folder(self._folder, MAX_RESULTS)

        match = next(
            (r for r in resources if asset_stem(r.get("public_id", "")) == normalized),
            None,
        )
        files = [AssetFile(public_id=r.get("public_id", ""), url=r.get("secure_url")) for r in resources]

        logger.info(
            "Asset search completed",
            query=normalized,
            candidates=len(files),
            matched=match is not None,
        )
        return AssetMatch(public_id=match["public_id"] if match else None, files=files)
