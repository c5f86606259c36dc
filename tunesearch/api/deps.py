"""
Shared route dependencies: upstream service singletons and query-string
parsing.
"""

import re
from typing import Optional

from tunesearch.services.search.base import SearchService
from tunesearch.services.search.models import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from tunesearch.services.search.soundcloud import SoundCloudService
from tunesearch.services.search.youtube import YouTubeService
from tunesearch.utils.exceptions import EmptyQueryError, InvalidArgumentError


_youtube_service: YouTubeService | None = None
_soundcloud_service: SoundCloudService | None = None

_LEADING_INT = re.compile(r"\s*[+-]?\d+")


def get_youtube_service() -> SearchService:
    """Get or lazily create the YouTube service."""
    global _youtube_service
    if _youtube_service is None:
        _youtube_service = YouTubeService()
    return _youtube_service


def get_soundcloud_service() -> SoundCloudService:
    """Get or lazily create the SoundCloud service."""
    global _soundcloud_service
    if _soundcloud_service is None:
        _soundcloud_service = SoundCloudService()
    return _soundcloud_service


async def close_services() -> None:
    """Close upstream HTTP clients (application shutdown)."""
    global _youtube_service, _soundcloud_service
    for service in (_youtube_service, _soundcloud_service):
        if service is not None:
            await service.close()
    _youtube_service = None
    _soundcloud_service = None


def _parse_int(raw: Optional[str], default: int) -> Optional[int]:
    """Leading-integer parse: "2abc" is 2, "6.5" is 6, "abc" is None."""
    if raw is None or raw == "":
        return default
    match = _LEADING_INT.match(raw)
    return int(match.group(0)) if match else None


def parse_query(q: Optional[str]) -> str:
    if q is None or not q.strip():
        raise EmptyQueryError()
    return q


def parse_page(raw: Optional[str]) -> int:
    page = _parse_int(raw, 1)
    if page is None or page < 1:
        raise InvalidArgumentError("page", "Page must be a positive integer")
    return page


def parse_limit(raw: Optional[str]) -> int:
    limit = _parse_int(raw, DEFAULT_PAGE_SIZE)
    if limit is None or limit < 1 or limit > MAX_PAGE_SIZE:
        raise InvalidArgumentError("limit", f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    return limit
