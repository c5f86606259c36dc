"""API schemas."""
from tunesearch.api.schemas.search import (
    YouTubePagination,
    YouTubeSearchData,
    YouTubeSearchResponse,
    VideoDetailsResponse,
    SoundCloudPagination,
    SoundCloudSearchData,
    SoundCloudSearchResponse,
    HealthResponse,
    ServiceHealth,
    ReadinessResponse,
    ErrorDetail,
    ErrorResponse,
)

__all__ = [
    "YouTubePagination",
    "YouTubeSearchData",
    "YouTubeSearchResponse",
    "VideoDetailsResponse",
    "SoundCloudPagination",
    "SoundCloudSearchData",
    "SoundCloudSearchResponse",
    "HealthResponse",
    "ServiceHealth",
    "ReadinessResponse",
    "ErrorDetail",
    "ErrorResponse",
]
