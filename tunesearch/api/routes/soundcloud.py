"""
Legacy SoundCloud Routes.

Kept for clients built against the SoundCloud-era front-end.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tunesearch.api.deps import get_soundcloud_service, parse_limit, parse_page, parse_query
from tunesearch.api.metrics import record_upstream
from tunesearch.api.schemas import (
    SoundCloudPagination,
    SoundCloudSearchData,
    SoundCloudSearchResponse,
)
from tunesearch.services.search.soundcloud import SoundCloudService
from tunesearch.utils.exceptions import MissingPageTokenError, TuneSearchError
from tunesearch.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/api/soundcloud", tags=["soundcloud"])


@router.get("/search", response_model=SoundCloudSearchResponse)
async def search_tracks(
    q: Optional[str] = Query(None, description="Search query"),
    page: Optional[str] = Query(None, description="Page number, 1-based"),
    limit: Optional[str] = Query(None, description="Items per page, 1-50"),
    service: SoundCloudService = Depends(get_soundcloud_service),
):
    """Search SoundCloud tracks with offset pagination for the first page."""
    query = parse_query(q)
    page_num = parse_page(page)
    limit_num = parse_limit(limit)

    logger.info(f'SoundCloud search request: query="{query}", page={page_num}, limit={limit_num}')

    try:
        result = await service.search(query, limit_num, page=page_num)
    except TuneSearchError as e:
        record_upstream("soundcloud", e.code)
        raise
    record_upstream("soundcloud", "ok")

    tracks = [item.to_track() for item in result.items]
    message = (
        f'Found {len(tracks)} tracks for "{query}"' if tracks else f'No tracks found for "{query}"'
    )
    return SoundCloudSearchResponse(
        data=SoundCloudSearchData(
            tracks=tracks,
            pagination=SoundCloudPagination(
                current_page=page_num,
                limit=limit_num,
                total_items=len(tracks),
                has_next=result.has_more,
                has_previous=page_num > 1,
                next_href=result.continuation_token,
            ),
        ),
        message=message,
    )


@router.get("/next", response_model=SoundCloudSearchResponse)
async def next_tracks(
    next_href: Optional[str] = Query(None, alias="nextHref", description="next_href from the previous response"),
    service: SoundCloudService = Depends(get_soundcloud_service),
):
    """Follow a SoundCloud ``next_href``."""
    if not next_href:
        raise MissingPageTokenError("nextHref")

    logger.info(f"SoundCloud next page request: {next_href}")

    try:
        result = await service.continue_search(next_href)
    except TuneSearchError as e:
        record_upstream("soundcloud", e.code)
        raise
    record_upstream("soundcloud", "ok")

    tracks = [item.to_track() for item in result.items]
    if not result.has_more:
        message = "No more results available"
    elif tracks:
        message = f"Found {len(tracks)} more tracks"
    else:
        message = "No more tracks found"

    return SoundCloudSearchResponse(
        data=SoundCloudSearchData(
            tracks=tracks,
            pagination=SoundCloudPagination(
                has_next=result.has_more,
                next_href=result.continuation_token,
            ),
        ),
        message=message,
    )
