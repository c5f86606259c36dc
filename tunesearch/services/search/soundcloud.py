"""
Legacy SoundCloud search service implementation.

SoundCloud pages with ``linked_partitioning``: every response carries a
``next_href`` URL that is itself the continuation token.
"""

import shlex
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from tunesearch.config import SoundCloudConfig, get_settings
from tunesearch.services.search.base import (
    HTTPSearchService,
    validate_page_size,
    validate_query,
    validate_token,
)
from tunesearch.services.search.errors import map_http_error, map_transport_error
from tunesearch.services.search.models import SearchPage, SearchResult, DEFAULT_PAGE_SIZE
from tunesearch.services.search.youtube import parse_timestamp
from tunesearch.utils.exceptions import (
    ConfigError,
    InvalidArgumentError,
    NotFoundError,
    UnknownError,
)
from tunesearch.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_soundcloud_time(value: Any) -> Optional[datetime]:
    parsed = parse_timestamp(value)
    if parsed is None and isinstance(value, str):
        # Older API versions: "2013/03/23 14:58:27 +0000"
        try:
            parsed = datetime.strptime(value, "%Y/%m/%d %H:%M:%S %z")
        except ValueError:
            return None
    return parsed


def _split_tags(tag_list: Any) -> tuple[str, ...]:
    """Split SoundCloud's space separated, quote-grouped tag string."""
    if not tag_list or not isinstance(tag_list, str):
        return ()
    try:
        return tuple(shlex.split(tag_list))
    except ValueError:
        return tuple(tag_list.split())


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_soundcloud_item(raw: dict) -> Optional[SearchResult]:
    """Map one SoundCloud track object to a SearchResult."""
    if raw.get("id") is None:
        return None

    user = raw.get("user") or {}
    author_id = user.get("id")

    return SearchResult(
        id=str(raw["id"]),
        title=raw.get("title") or "",
        description=raw.get("description"),
        thumbnail_url=raw.get("artwork_url"),
        permalink_url=raw.get("permalink_url") or "",
        stream_url=raw.get("stream_url"),
        author_name=user.get("username") or "",
        author_id=str(author_id) if author_id is not None else None,
        author_avatar_url=user.get("avatar_url"),
        published_at=_parse_soundcloud_time(raw.get("created_at")),
        duration=_optional_int(raw.get("duration")),
        playback_count=_optional_int(raw.get("playback_count")),
        likes_count=_optional_int(raw.get("likes_count", raw.get("favoritings_count"))),
        tags=_split_tags(raw.get("tag_list")),
        genre=raw.get("genre"),
        source="soundcloud",
    )


class SoundCloudService(HTTPSearchService):
    """SoundCloud ``/tracks`` search, kept for the legacy client."""

    provider = "soundcloud"
    label = "SoundCloud"

    def __init__(
        self,
        config: Optional[SoundCloudConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        config = config or get_settings().soundcloud
        super().__init__(config.base_url, config.timeout, transport=transport)
        self.client_id = config.client_id

    def _check_credentials(self) -> None:
        if not self.client_id:
            raise ConfigError("SoundCloud Client ID not configured")

    def _check_next_href(self, next_href: str) -> None:
        """Only follow continuation URLs pointing back at the SoundCloud API host."""
        expected = urlparse(self.base_url)
        parsed = urlparse(next_href)
        if parsed.scheme != expected.scheme or parsed.netloc != expected.netloc:
            raise InvalidArgumentError("nextHref", "nextHref must point to the SoundCloud API")

    async def _get(self, url: str, params: Optional[dict] = None) -> dict:
        try:
            client = await self._get_client()
            response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            error = map_http_error(self.label, e.response, not_found_message="No tracks found")
            logger.error(f"SoundCloud API error: {error.details}")
            raise error from e
        except httpx.HTTPError as e:
            logger.error(f"SoundCloud request failed: {e!r}")
            raise map_transport_error(self.label, e, self.timeout) from e
        except ValueError as e:
            raise UnknownError("Failed to search tracks", details=str(e)) from e

        if not isinstance(data, dict):
            raise UnknownError("Failed to search tracks", details=f"Unexpected body: {data!r}")
        return data

    def _parse_page(self, data: dict, query: str) -> SearchPage:
        items = []
        for raw in data.get("collection") or []:
            result = normalize_soundcloud_item(raw)
            if result is not None:
                items.append(result)
        return SearchPage(
            items=items,
            continuation_token=data.get("next_href") or None,
            total_estimate=None,  # SoundCloud does not report a total
            query=query,
        )

    async def search(
        self,
        query: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        page_token: Optional[str] = None,
        page: int = 1,
    ) -> SearchPage:
        """
        Search SoundCloud tracks.

        ``page`` is turned into an offset for the first request only;
        later pages should come from :meth:`continue_search`.
        """
        if page_token:
            return await self.continue_search(page_token, page_size, query)

        query = validate_query(query)
        page_size = validate_page_size(page_size)
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise InvalidArgumentError("page", "Page must be a positive integer")
        self._check_credentials()

        params = {
            "client_id": self.client_id,
            "q": query,
            "limit": page_size,
            "offset": (page - 1) * page_size,
            "linked_partitioning": 1,
        }
        logger.info(f"SoundCloud API request: q='{query}', limit={page_size}, offset={params['offset']}")

        try:
            data = await self._get(f"{self.base_url}/tracks", params=params)
        except NotFoundError:
            return SearchPage.empty(query)

        result = self._parse_page(data, query)
        logger.info(f"SoundCloud search complete: {len(result.items)} tracks found")
        return result

    async def continue_search(
        self,
        token: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        query: str = "",
    ) -> SearchPage:
        """Follow a ``next_href``; page size is already baked into the URL."""
        token = validate_token(token, field="nextHref")
        validate_page_size(page_size)
        self._check_next_href(token)
        self._check_credentials()

        params = None if "client_id=" in token else {"client_id": self.client_id}
        logger.info(f"SoundCloud next page: {token}")

        data = await self._get(token, params=params)
        result = self._parse_page(data, query)
        logger.info(f"SoundCloud next page complete: {len(result.items)} tracks found")
        return result

    async def health_check(self) -> bool:
        if not self.client_id:
            return False
        try:
            client = await self._get_client()
            response = await client.get(f"{self.base_url}/", params={"client_id": self.client_id})
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.warning(f"SoundCloud health check failed: {e}")
            return False
