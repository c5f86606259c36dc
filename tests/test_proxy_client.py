"""Tests for the client that searches through the TuneSearch API."""

import httpx
import pytest

from conftest import RecordingTransport, youtube_body, youtube_error, youtube_item
from tunesearch.api.app import create_app
from tunesearch.api.deps import get_youtube_service
from tunesearch.config import ClientConfig, YouTubeConfig
from tunesearch.core.aggregator import ResultAggregator, SessionState
from tunesearch.services.search import ProxySearchService, YouTubeService
from tunesearch.services.search.proxy import normalize_proxy_track
from tunesearch.utils.exceptions import (
    AuthOrQuotaError,
    EmptyQueryError,
    NotFoundError,
    RateLimitedError,
    SearchConnectionError,
    UnavailableError,
    UnknownError,
)


API_URL = "http://tunesearch.test"


def make_proxy(handler, page_size=6):
    transport = RecordingTransport(handler)
    config = ClientConfig(api_url=API_URL, page_size=page_size)
    return ProxySearchService(config, transport=transport), transport


def proxy_body(tracks, next_href=None, total=0):
    return {
        "success": True,
        "data": {"tracks": tracks, "videos": tracks, "pagination": {"next_page_token": next_href}},
        "tracks": tracks,
        "hasNext": next_href is not None,
        "nextHref": next_href,
        "totalResults": total,
        "message": "ok",
    }


def proxy_error(status, message):
    return httpx.Response(status, json={"error": {"message": message, "status": status}})


YOUTUBE_TRACK = {
    "id": "abc",
    "title": "Lofi Mix",
    "description": "chill",
    "artwork_url": "https://i.ytimg.test/abc/hq.jpg",
    "permalink_url": "https://www.youtube.com/watch?v=abc",
    "video_url": "https://www.youtube.com/watch?v=abc",
    "embed_url": "https://www.youtube.com/embed/abc",
    "user": {"id": "UC1", "username": "Chill Hop", "avatar_url": None},
    "channel": {"name": "Chill Hop", "id": "UC1"},
    "created_at": "2023-05-01T12:00:00Z",
    "published_at": "2023-05-01T12:00:00Z",
    "duration": None,
    "playback_count": None,
    "likes_count": None,
    "tag_list": "",
}


class TestNormalizeProxyTrack:
    """Track payloads back into results."""

    def test_youtube_track(self):
        result = normalize_proxy_track(YOUTUBE_TRACK)

        assert result.id == "abc"
        assert result.source == "youtube"
        assert result.author_name == "Chill Hop"
        assert result.embed_url == "https://www.youtube.com/embed/abc"
        assert result.published_at.year == 2023

    def test_round_trips_to_same_track(self):
        assert normalize_proxy_track(YOUTUBE_TRACK).to_track() == YOUTUBE_TRACK

    def test_missing_id(self):
        assert normalize_proxy_track({"title": "x"}) is None


class TestProxySearch:
    """Calls to /api/youtube/search and /api/youtube/next."""

    @pytest.mark.asyncio
    async def test_search_request(self):
        service, transport = make_proxy(
            lambda request: httpx.Response(200, json=proxy_body([YOUTUBE_TRACK], "T1", 1000))
        )

        page = await service.search(" lofi ", page_size=6)

        request = transport.requests[0]
        assert request.url.path == "/api/youtube/search"
        assert request.url.params["q"] == "lofi"
        assert request.url.params["limit"] == "6"
        assert page.continuation_token == "T1"
        assert page.total_estimate == 1000
        assert page.items[0].id == "abc"
        await service.close()

    @pytest.mark.asyncio
    async def test_continue_request(self):
        service, transport = make_proxy(
            lambda request: httpx.Response(200, json=proxy_body([YOUTUBE_TRACK]))
        )

        page = await service.continue_search("T1", page_size=6, query="lofi")

        request = transport.requests[0]
        assert request.url.path == "/api/youtube/next"
        assert request.url.params["pageToken"] == "T1"
        assert request.url.params["q"] == "lofi"
        assert not page.has_more
        await service.close()

    @pytest.mark.asyncio
    async def test_empty_query_never_reaches_server(self):
        service, transport = make_proxy(lambda request: httpx.Response(500))

        with pytest.raises(EmptyQueryError):
            await service.search("  ")

        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_not_found_search_is_empty(self):
        service, _ = make_proxy(lambda request: proxy_error(404, "No videos found"))

        page = await service.search("nothing")

        assert page.items == []
        await service.close()

    @pytest.mark.asyncio
    async def test_not_found_continue_propagates(self):
        service, _ = make_proxy(lambda request: proxy_error(404, "No videos found"))

        with pytest.raises(NotFoundError):
            await service.continue_search("OLD")

        await service.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, error_type",
        [
            (401, AuthOrQuotaError),
            (429, RateLimitedError),
            (408, UnavailableError),
            (503, UnavailableError),
            (500, UnknownError),
        ],
    )
    async def test_server_errors_keep_message(self, status, error_type):
        service, _ = make_proxy(lambda request: proxy_error(status, "server says no"))

        with pytest.raises(error_type) as exc_info:
            await service.search("lofi")

        assert exc_info.value.message == "server says no"
        assert exc_info.value.status == status
        await service.close()

    @pytest.mark.asyncio
    async def test_server_down(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service, _ = make_proxy(handler)

        with pytest.raises(SearchConnectionError):
            await service.search("lofi")

        await service.close()


class TestEndToEnd:
    """Client, aggregator and API wired together in process."""

    @pytest.mark.asyncio
    async def test_search_then_load_more(self):
        def youtube_handler(request):
            token = request.url.params.get("pageToken")
            if token is None:
                items = [youtube_item(f"a{i}") for i in range(6)]
                return httpx.Response(200, json=youtube_body(items, next_token="T1", total=1000000))
            if token == "T1":
                items = [youtube_item(f"b{i}") for i in range(6)]
                return httpx.Response(200, json=youtube_body(items, next_token="T2", total=1000000))
            return youtube_error(400, "Invalid value for pageToken")

        app = create_app()
        youtube = YouTubeService(
            YouTubeConfig(api_key="test-key", base_url="https://yt.test/youtube/v3"),
            transport=RecordingTransport(youtube_handler),
        )
        app.dependency_overrides[get_youtube_service] = lambda: youtube

        service = ProxySearchService(
            ClientConfig(api_url=API_URL),
            transport=httpx.ASGITransport(app=app),
        )
        aggregator = ResultAggregator(service, page_size=6)

        first = await aggregator.start_search("lofi")
        assert first.state == SessionState.LOADED
        assert len(first.items) == 6
        assert first.total_estimate == 1000

        second = await aggregator.load_more()
        assert len(second.items) == 12
        assert second.items[0].id == "a0"
        assert second.items[6].id == "b0"
        assert second.continuation_token == "T2"

        third = await aggregator.load_more()
        assert third.state == SessionState.ERRORED
        assert third.error.message == "Invalid value for pageToken"
        assert len(third.items) == 12

        await service.close()
        await youtube.close()
