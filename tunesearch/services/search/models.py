"""
Search service models.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


MAX_PAGE_SIZE = 50
DEFAULT_PAGE_SIZE = 6


@dataclass(frozen=True)
class SearchResult:
    """A single normalized result, independent of the upstream it came from."""

    id: str
    title: str
    permalink_url: str
    author_name: str = ""
    author_id: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    published_at: Optional[datetime] = None
    duration: Optional[int] = None  # milliseconds
    playback_count: Optional[int] = None
    likes_count: Optional[int] = None
    tags: tuple[str, ...] = ()
    source: str = "youtube"
    author_avatar_url: Optional[str] = None
    embed_url: Optional[str] = None
    stream_url: Optional[str] = None
    genre: Optional[str] = None

    def to_track(self) -> dict[str, Any]:
        """Render the result in the track shape the web client consumes."""
        published = self.published_at.isoformat().replace("+00:00", "Z") if self.published_at else None
        track: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "artwork_url": self.thumbnail_url,
            "permalink_url": self.permalink_url,
            "user": {
                "id": self.author_id,
                "username": self.author_name,
                "avatar_url": self.author_avatar_url,
            },
            "created_at": published,
            "duration": self.duration,
            "playback_count": self.playback_count,
            "likes_count": self.likes_count,
            "tag_list": " ".join(self.tags),
        }
        if self.source == "youtube":
            track.update({
                "video_url": self.permalink_url,
                "embed_url": self.embed_url,
                "channel": {"name": self.author_name, "id": self.author_id},
                "published_at": published,
            })
        else:
            track.update({
                "stream_url": self.stream_url,
                "genre": self.genre,
            })
        return track


@dataclass
class SearchPage:
    """One page of results plus the continuation state needed for the next."""

    items: list[SearchResult] = field(default_factory=list)
    continuation_token: Optional[str] = None
    total_estimate: Optional[int] = None
    prev_token: Optional[str] = None
    query: str = ""

    @property
    def has_more(self) -> bool:
        return self.continuation_token is not None

    @property
    def has_results(self) -> bool:
        return len(self.items) > 0

    @classmethod
    def empty(cls, query: str = "") -> "SearchPage":
        return cls(items=[], continuation_token=None, total_estimate=0, query=query)
