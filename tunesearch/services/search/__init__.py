"""Search Service - YouTube, legacy SoundCloud and proxy client integration."""
from .base import SearchService
from .youtube import YouTubeService, normalize_youtube_item
from .soundcloud import SoundCloudService, normalize_soundcloud_item
from .proxy import ProxySearchService
from .models import SearchResult, SearchPage

__all__ = [
    "SearchService",
    "YouTubeService",
    "SoundCloudService",
    "ProxySearchService",
    "SearchResult",
    "SearchPage",
    "normalize_youtube_item",
    "normalize_soundcloud_item",
]
