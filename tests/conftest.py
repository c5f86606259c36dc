"""Shared fixtures and upstream payload builders."""

import httpx
import pytest

from tunesearch.config import YouTubeConfig, SoundCloudConfig, clear_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep every test away from real credentials, config files and history."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TUNESEARCH_HISTORY_DATABASE", str(tmp_path / "history.db"))
    for name in (
        "YOU_TUBE_API_KEY",
        "TUNESEARCH_YOUTUBE_API_KEY",
        "SOUNDCLOUD_CLIENT_ID",
        "TUNESEARCH_SOUNDCLOUD_CLIENT_ID",
        "TUNESEARCH_CONFIG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def youtube_config():
    return YouTubeConfig(api_key="test-key", base_url="https://yt.test/youtube/v3")


@pytest.fixture
def soundcloud_config():
    return SoundCloudConfig(client_id="test-client", base_url="https://sc.test")


def youtube_item(video_id: str, title: str = "", channel: str = "Some Channel", **snippet) -> dict:
    body = {
        "title": title or f"Video {video_id}",
        "description": f"About {video_id}",
        "channelId": f"UC{video_id}",
        "channelTitle": channel,
        "publishedAt": "2023-05-01T12:00:00Z",
        "thumbnails": {
            "default": {"url": f"https://i.ytimg.test/{video_id}/default.jpg"},
            "high": {"url": f"https://i.ytimg.test/{video_id}/hq.jpg"},
        },
    }
    body.update(snippet)
    return {"kind": "youtube#searchResult", "id": {"kind": "youtube#video", "videoId": video_id}, "snippet": body}


def youtube_body(items, next_token=None, prev_token=None, total=None) -> dict:
    body = {"kind": "youtube#searchListResponse", "items": items}
    if next_token:
        body["nextPageToken"] = next_token
    if prev_token:
        body["prevPageToken"] = prev_token
    if total is not None:
        body["pageInfo"] = {"totalResults": total, "resultsPerPage": len(items)}
    return body


def youtube_error(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


def soundcloud_track(track_id: int, title: str = "", **extra) -> dict:
    track = {
        "id": track_id,
        "title": title or f"Track {track_id}",
        "description": None,
        "duration": 215000,
        "artwork_url": f"https://i1.sndcdn.test/{track_id}.jpg",
        "permalink_url": f"https://soundcloud.test/artist/track-{track_id}",
        "stream_url": f"https://api.sc.test/tracks/{track_id}/stream",
        "user": {"id": 42, "username": "artist", "avatar_url": "https://i1.sndcdn.test/avatar.jpg"},
        "created_at": "2013/03/23 14:58:27 +0000",
        "genre": "Jazz",
        "tag_list": 'jazz "smooth jazz" live',
        "playback_count": 1200,
        "likes_count": 33,
    }
    track.update(extra)
    return track


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)
