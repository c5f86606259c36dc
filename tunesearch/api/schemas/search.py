"""
API Request/Response Schemas.

Pydantic models for the proxy's response bodies. Track payloads are kept
as plain dicts; their shape comes from ``SearchResult.to_track``.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field


# =============================================================================
# YOUTUBE
# =============================================================================

class YouTubePagination(BaseModel):
    """Pagination block of a YouTube search response."""
    current_page: int
    limit: int
    total_items: int
    has_next: bool
    has_previous: bool
    next_page_token: Optional[str] = None
    prev_page_token: Optional[str] = None


class YouTubeSearchData(BaseModel):
    tracks: list[dict[str, Any]]
    videos: list[dict[str, Any]]
    pagination: YouTubePagination


class YouTubeSearchResponse(BaseModel):
    """
    Response of ``/api/youtube/search`` and ``/api/youtube/next``.

    The top-level ``tracks``, ``hasNext``, ``nextHref`` and ``totalResults``
    fields duplicate ``data`` for older clients.
    """
    success: bool = True
    data: YouTubeSearchData
    tracks: list[dict[str, Any]]
    hasNext: bool
    nextHref: Optional[str] = None
    totalResults: int
    message: str


class VideoDetailsResponse(BaseModel):
    id: str
    video_url: str
    embed_url: str
    message: str


# =============================================================================
# SOUNDCLOUD (legacy)
# =============================================================================

class SoundCloudPagination(BaseModel):
    current_page: Optional[int] = None
    limit: Optional[int] = None
    total_items: Optional[int] = None
    has_next: bool
    has_previous: Optional[bool] = None
    next_href: Optional[str] = None


class SoundCloudSearchData(BaseModel):
    tracks: list[dict[str, Any]]
    pagination: SoundCloudPagination


class SoundCloudSearchResponse(BaseModel):
    success: bool = True
    data: SoundCloudSearchData
    message: str


# =============================================================================
# HEALTH / ERRORS
# =============================================================================

class HealthResponse(BaseModel):
    """Liveness response."""
    status: str = "OK"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    service: str


class ServiceHealth(BaseModel):
    """Health status of an upstream."""
    name: str
    healthy: bool
    latency_ms: float | None = None
    error: str | None = None


class ReadinessResponse(BaseModel):
    status: str
    services: list[ServiceHealth]


class ErrorDetail(BaseModel):
    message: str
    status: int


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: ErrorDetail
