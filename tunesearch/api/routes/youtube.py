"""
YouTube Search Routes.

Proxies searches to the YouTube Data API and returns normalized tracks
with token-based pagination.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from tunesearch.api.deps import get_youtube_service, parse_limit, parse_page, parse_query
from tunesearch.api.metrics import record_upstream
from tunesearch.api.schemas import (
    ErrorResponse,
    VideoDetailsResponse,
    YouTubePagination,
    YouTubeSearchData,
    YouTubeSearchResponse,
)
from tunesearch.services.search.base import SearchService
from tunesearch.services.search.models import SearchPage
from tunesearch.services.search.youtube import EMBED_URL, WATCH_URL
from tunesearch.utils.exceptions import MissingPageTokenError, TuneSearchError
from tunesearch.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter(prefix="/api/youtube", tags=["youtube"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid query, limit, page or token"},
    401: {"model": ErrorResponse, "description": "API key rejected"},
    429: {"model": ErrorResponse, "description": "Quota exceeded"},
    500: {"model": ErrorResponse, "description": "Unclassified upstream failure"},
}


def build_search_response(page: SearchPage, current_page: int, limit: int, query: str) -> YouTubeSearchResponse:
    """Render a SearchPage in the proxy's YouTube response shape."""
    tracks = [item.to_track() for item in page.items]
    total = page.total_estimate or 0

    if tracks:
        message = f'Found {len(tracks)} videos for "{query}"'
    else:
        message = f'No videos found for "{query}"'

    return YouTubeSearchResponse(
        data=YouTubeSearchData(
            tracks=tracks,
            videos=tracks,
            pagination=YouTubePagination(
                current_page=current_page,
                limit=limit,
                total_items=total,
                has_next=page.has_more,
                has_previous=page.prev_token is not None,
                next_page_token=page.continuation_token,
                prev_page_token=page.prev_token,
            ),
        ),
        tracks=tracks,
        hasNext=page.has_more,
        nextHref=page.continuation_token,
        totalResults=total,
        message=message,
    )


@router.get("/search", response_model=YouTubeSearchResponse, responses=ERROR_RESPONSES)
async def search_videos(
    q: Optional[str] = Query(None, description="Search query"),
    page: Optional[str] = Query(None, description="Page number, 1-based"),
    limit: Optional[str] = Query(None, description="Items per page, 1-50"),
    page_token: Optional[str] = Query(None, alias="pageToken", description="Continuation token"),
    service: SearchService = Depends(get_youtube_service),
):
    """
    Search YouTube music videos.

    ``page`` is informational only; YouTube pages by ``pageToken``.
    """
    query = parse_query(q)
    page_num = parse_page(page)
    limit_num = parse_limit(limit)

    logger.info(
        f'YouTube search request: query="{query}", page={page_num}, '
        f"limit={limit_num}, pageToken={page_token}"
    )

    try:
        result = await service.search(query, limit_num, page_token or None)
    except TuneSearchError as e:
        record_upstream("youtube", e.code)
        raise
    record_upstream("youtube", "ok")

    return build_search_response(result, page_num, limit_num, query)


@router.get("/next", response_model=YouTubeSearchResponse, responses=ERROR_RESPONSES)
async def next_page(
    page_token: Optional[str] = Query(None, alias="pageToken", description="Token from the previous response"),
    q: str = Query("", description="Original search query"),
    limit: Optional[str] = Query(None, description="Items per page, 1-50"),
    service: SearchService = Depends(get_youtube_service),
):
    """Get the page following a previous search response."""
    if not page_token:
        raise MissingPageTokenError("pageToken")
    limit_num = parse_limit(limit)

    logger.info(f'YouTube next page request: pageToken={page_token}, query="{q}", limit={limit_num}')

    try:
        result = await service.continue_search(page_token, limit_num, q)
    except TuneSearchError as e:
        record_upstream("youtube", e.code)
        raise
    record_upstream("youtube", "ok")

    return build_search_response(result, 1, limit_num, q)


@router.get("/video/{video_id}", response_model=VideoDetailsResponse)
async def video_details(video_id: str):
    """Watch and embed links for a video id."""
    return VideoDetailsResponse(
        id=video_id,
        video_url=WATCH_URL.format(video_id),
        embed_url=EMBED_URL.format(video_id),
        message="Video details endpoint - watch and embed links only",
    )
