from fastapi import APIRouter, Depends, Query

from ....application.dtos import SearchResponse
from ....application.services import AssetLookupService
from ..dependencies import get_asset_lookup_service

router = APIRouter(prefix="/api", tags=["search"])


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Find a sign asset by name",
    description="Match the normalized query against file names in the asset folder.",
)
async def search(
    q: str = Query(default="", description="File name to look for"),
    service: AssetLookupService = Depends(get_asset_lookup_service),
) -> SearchResponse:
    match = await service.search(q)
    return SearchResponse.from_match(match)
