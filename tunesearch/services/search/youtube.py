"""
YouTube Data API v3 search service implementation.
"""

import time
from datetime import datetime
from typing import Any, Optional

import httpx

from tunesearch.config import YouTubeConfig, get_settings
from tunesearch.services.search.base import (
    HTTPSearchService,
    validate_page_size,
    validate_query,
    validate_token,
)
from tunesearch.services.search.errors import map_http_error, map_transport_error
from tunesearch.services.search.models import SearchPage, SearchResult, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from tunesearch.utils.exceptions import ConfigError, NotFoundError, UnknownError
from tunesearch.utils.logging import get_logger

logger = get_logger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={}"
EMBED_URL = "https://www.youtube.com/embed/{}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 upstream timestamp, None when absent or malformed."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _pick_thumbnail(thumbnails: Any) -> Optional[str]:
    if not isinstance(thumbnails, dict):
        return None
    for size in ("high", "medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return None


def normalize_youtube_item(raw: dict) -> Optional[SearchResult]:
    """
    Map one ``search#result`` item to a SearchResult.

    The search endpoint carries no duration, view or like counts; those
    stay None rather than costing a second ``videos`` call.
    Items without a video id (channels, playlists) yield None.
    """
    raw_id = raw.get("id")
    video_id = raw_id.get("videoId") if isinstance(raw_id, dict) else None
    if not video_id:
        return None

    snippet = raw.get("snippet") or {}
    tags = snippet.get("tags") or []

    return SearchResult(
        id=video_id,
        title=snippet.get("title", ""),
        description=snippet.get("description"),
        thumbnail_url=_pick_thumbnail(snippet.get("thumbnails")),
        permalink_url=WATCH_URL.format(video_id),
        embed_url=EMBED_URL.format(video_id),
        author_name=snippet.get("channelTitle", ""),
        author_id=snippet.get("channelId"),
        published_at=parse_timestamp(snippet.get("publishedAt")),
        tags=tuple(str(t) for t in tags),
        source="youtube",
    )


class YouTubeService(HTTPSearchService):
    """
    YouTube Data API v3 search.

    Pages are addressed only by the ``nextPageToken`` YouTube returns;
    there is no offset arithmetic.
    """

    provider = "youtube"
    label = "YouTube"

    def __init__(
        self,
        config: Optional[YouTubeConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_settings().youtube
        super().__init__(config.base_url, config.timeout, transport=transport)
        self.api_key = config.api_key
        self.category_id = config.category_id
        self.order = config.order
        self.max_total_results = config.max_total_results

    def _build_params(self, query: str, page_size: int, page_token: Optional[str]) -> dict:
        params = {
            "key": self.api_key,
            "part": "snippet",
            "q": query,
            "type": "video",
            "videoCategoryId": self.category_id,
            "maxResults": min(page_size, MAX_PAGE_SIZE),
            "order": self.order,
        }
        if page_token:
            params["pageToken"] = page_token
        return params

    async def _fetch(self, query: str, page_size: int, page_token: Optional[str]) -> dict:
        if not self.api_key:
            raise ConfigError("YouTube API key not configured")

        params = self._build_params(query, page_size, page_token)
        logger.info(
            f"YouTube API request: q='{query}', maxResults={params['maxResults']}, "
            f"pageToken={page_token}"
        )

        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/search", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            error = map_http_error(self.label, e.response)
            logger.error(f"YouTube API error: {error.details}")
            raise error from e
        except httpx.HTTPError as e:
            logger.error(f"YouTube request failed for query '{query}': {e!r}")
            raise map_transport_error(self.label, e, self.timeout) from e
        except ValueError as e:
            logger.error(f"YouTube returned a non-JSON body: {e}")
            raise UnknownError("Failed to search YouTube videos", details=str(e)) from e

        if not isinstance(data, dict):
            raise UnknownError("Failed to search YouTube videos", details=f"Unexpected body: {data!r}")
        return data

    def _parse_page(self, data: dict, query: str) -> SearchPage:
        items = []
        for raw in data.get("items") or []:
            result = normalize_youtube_item(raw)
            if result is not None:
                items.append(result)

        page_info = data.get("pageInfo") or {}
        total_estimate = None
        try:
            total_estimate = min(int(page_info["totalResults"]), self.max_total_results)
        except (KeyError, TypeError, ValueError):
            logger.debug(f"YouTube search: unusable pageInfo {page_info!r}")

        return SearchPage(
            items=items,
            continuation_token=data.get("nextPageToken") or None,
            prev_token=data.get("prevPageToken") or None,
            total_estimate=total_estimate,
            query=query,
        )

    async def search(
        self,
        query: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: Optional[str] = None,
    ) -> SearchPage:
        """Execute a search query against the YouTube search endpoint."""
        query = validate_query(query)
        page_size = validate_page_size(page_size)
        start_time = time.time()

        try:
            data = await self._fetch(query, page_size, page_token or None)
        except NotFoundError:
            logger.info(f"YouTube search: no videos found for '{query}'")
            return SearchPage.empty(query)

        page = self._parse_page(data, query)
        logger.info(
            f"YouTube search complete: '{query}' -> {len(page.items)} videos "
            f"in {time.time() - start_time:.2f}s"
        )
        return page

    async def continue_search(
        self,
        token: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        query: str = "",
    ) -> SearchPage:
        """Fetch the page addressed by ``token``."""
        token = validate_token(token)
        page_size = validate_page_size(page_size)
        query = query.strip() if isinstance(query, str) else ""

        data = await self._fetch(query, page_size, token)
        page = self._parse_page(data, query)
        logger.info(f"YouTube next page: {len(page.items)} videos, has_more={page.has_more}")
        return page

    async def health_check(self) -> bool:
        """YouTube is considered healthy when a key is configured and the host answers."""
        if not self.api_key:
            return False
        try:
            client = await self._get_client()
            response = await client.get(
                f"{self.base_url}/videoCategories",
                params={"key": self.api_key, "part": "snippet", "id": self.category_id},
            )
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"YouTube health check failed: {e}")
            return False
