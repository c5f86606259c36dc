"""
Client for the TuneSearch proxy's own HTTP API.

The terminal client never talks to YouTube directly: it calls
``/api/youtube/search`` and ``/api/youtube/next`` and turns the track
payloads back into SearchResult objects.
"""

from typing import Any, Optional

import httpx

from tunesearch.config import ClientConfig, get_settings
from tunesearch.services.search.base import (
    HTTPSearchService,
    validate_page_size,
    validate_query,
    validate_token,
)
from tunesearch.services.search.errors import map_transport_error, upstream_message
from tunesearch.services.search.models import SearchPage, SearchResult, DEFAULT_PAGE_SIZE
from tunesearch.services.search.youtube import parse_timestamp
from tunesearch.utils.exceptions import (
    AuthOrQuotaError,
    BadRequestError,
    NotFoundError,
    RateLimitedError,
    SearchError,
    UnavailableError,
    UnknownError,
)
from tunesearch.utils.logging import get_logger

logger = get_logger(__name__)


def normalize_proxy_track(track: dict) -> Optional[SearchResult]:
    """Map one track from the proxy's response body to a SearchResult."""
    if track.get("id") is None:
        return None

    user = track.get("user") or {}
    tag_list = track.get("tag_list") or ""
    source = "youtube" if "video_url" in track else "soundcloud"

    return SearchResult(
        id=str(track["id"]),
        title=track.get("title") or "",
        description=track.get("description"),
        thumbnail_url=track.get("artwork_url"),
        permalink_url=track.get("permalink_url") or "",
        author_name=user.get("username") or "",
        author_id=user.get("id"),
        author_avatar_url=user.get("avatar_url"),
        published_at=parse_timestamp(track.get("published_at") or track.get("created_at")),
        duration=track.get("duration"),
        playback_count=track.get("playback_count"),
        likes_count=track.get("likes_count"),
        tags=tuple(tag_list.split()) if isinstance(tag_list, str) else (),
        embed_url=track.get("embed_url"),
        stream_url=track.get("stream_url"),
        genre=track.get("genre"),
        source=source,
    )


def map_proxy_error(response: httpx.Response) -> SearchError:
    """The proxy already speaks the error taxonomy; keep its message verbatim."""
    status = response.status_code
    message = upstream_message(response) or f"Error {status}"
    if status == 400:
        return BadRequestError(message)
    if status in (401, 403):
        return AuthOrQuotaError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 429:
        return RateLimitedError(message)
    if status in (408, 502, 503, 504):
        return UnavailableError(message, status=status)
    return UnknownError(message, details=response.text[:500], status=status)


class ProxySearchService(HTTPSearchService):
    """SearchService that goes through the TuneSearch proxy."""

    provider = "proxy"
    label = "TuneSearch API"

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_settings().client
        super().__init__(config.api_url, config.timeout, transport=transport)

    async def _get(self, path: str, params: dict) -> dict:
        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}{path}", params=params)
        except httpx.HTTPError as e:
            logger.error(f"Proxy request {path} failed: {e!r}")
            raise map_transport_error(self.label, e, self.timeout) from e

        if response.status_code >= 400:
            raise map_proxy_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise UnknownError("Unexpected response from the search API", details=str(e)) from e
        if not isinstance(data, dict):
            raise UnknownError("Unexpected response from the search API")
        return data

    def _parse_page(self, data: dict[str, Any], query: str) -> SearchPage:
        body = data.get("data") or {}
        pagination = body.get("pagination") or {}
        tracks = data.get("tracks", body.get("tracks")) or []

        items = []
        for track in tracks:
            result = normalize_proxy_track(track)
            if result is not None:
                items.append(result)

        token = data.get("nextHref", pagination.get("next_page_token"))
        return SearchPage(
            items=items,
            continuation_token=token or None,
            prev_token=pagination.get("prev_page_token") or None,
            total_estimate=data.get("totalResults", pagination.get("total_items")),
            query=query,
        )

    async def search(
        self,
        query: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: Optional[str] = None,
    ) -> SearchPage:
        query = validate_query(query)
        page_size = validate_page_size(page_size)

        params: dict[str, Any] = {"q": query, "page": 1, "limit": page_size}
        if page_token:
            params["pageToken"] = page_token

        try:
            data = await self._get("/api/youtube/search", params)
        except NotFoundError:
            return SearchPage.empty(query)
        return self._parse_page(data, query)

    async def continue_search(
        self,
        token: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        query: str = "",
    ) -> SearchPage:
        token = validate_token(token)
        page_size = validate_page_size(page_size)

        data = await self._get(
            "/api/youtube/next",
            {"pageToken": token, "q": query or "", "limit": page_size},
        )
        return self._parse_page(data, query)

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"TuneSearch API health check failed: {e}")
            return False
