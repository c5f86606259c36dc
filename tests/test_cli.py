"""Tests for the tunesearch command line."""

import httpx
import pytest
from typer.testing import CliRunner

from conftest import RecordingTransport
from tunesearch import cli
from tunesearch.services.search.proxy import ProxySearchService, normalize_proxy_track


runner = CliRunner()


def track(video_id):
    return {
        "id": video_id,
        "title": f"Video {video_id}",
        "description": "A long description " * 10,
        "artwork_url": None,
        "permalink_url": f"https://www.youtube.com/watch?v={video_id}",
        "video_url": f"https://www.youtube.com/watch?v={video_id}",
        "embed_url": f"https://www.youtube.com/embed/{video_id}",
        "user": {"id": "UC1", "username": "Chill Hop", "avatar_url": None},
        "created_at": "2023-05-01T12:00:00Z",
        "published_at": "2023-05-01T12:00:00Z",
        "tag_list": "",
    }


def page_body(ids, next_href=None, total=1000):
    tracks = [track(i) for i in ids]
    return {"success": True, "tracks": tracks, "nextHref": next_href, "totalResults": total, "message": "ok"}


@pytest.fixture
def api(monkeypatch):
    """Route the CLI's API client to a mock handler; returns the transport."""
    def install(handler):
        transport = RecordingTransport(handler)
        monkeypatch.setattr(
            cli, "ProxySearchService", lambda config: ProxySearchService(config, transport=transport)
        )
        return transport

    return install


class TestSearchCommand:
    """tunesearch search."""

    def test_prints_cards_and_records_history(self, api):
        api(lambda request: httpx.Response(200, json=page_body(["a", "b"], next_href="T1")))

        result = runner.invoke(cli.app, ["search", "lofi beats"])

        assert result.exit_code == 0, result.output
        assert 'Showing 2 videos of 1,000 results for "lofi beats"' in result.output
        assert "  1. Video a" in result.output
        assert "Chill Hop · 2023-05-01" in result.output
        assert "https://www.youtube.com/watch?v=b" in result.output
        assert "More results available (use --pages)" in result.output

        history = runner.invoke(cli.app, ["history", "show"])
        assert "Recent searches (1/5):" in history.output
        assert "1. lofi beats" in history.output

    def test_pages_follow_continuation_tokens(self, api):
        def handler(request):
            if request.url.path == "/api/youtube/search":
                return httpx.Response(200, json=page_body(["a1", "a2"], next_href="T1"))
            assert request.url.params["pageToken"] == "T1"
            assert request.url.params["q"] == "lofi"
            return httpx.Response(200, json=page_body(["b1"]))

        transport = api(handler)

        result = runner.invoke(cli.app, ["search", "lofi", "--pages", "3", "--limit", "2"])

        assert result.exit_code == 0, result.output
        assert "Showing 3 videos" in result.output
        assert "No more videos to load" in result.output
        assert len(transport.requests) == 2
        assert transport.requests[0].url.params["limit"] == "2"

    def test_no_results(self, api):
        api(lambda request: httpx.Response(200, json=page_body([], total=0)))

        result = runner.invoke(cli.app, ["search", "zzzzqqq"])

        assert result.exit_code == 0
        assert 'No videos found for "zzzzqqq"' in result.output

    def test_error_exits_non_zero_and_skips_history(self, api):
        api(lambda request: httpx.Response(
            429, json={"error": {"message": "YouTube API quota exceeded. Please try again later.", "status": 429}}
        ))

        result = runner.invoke(cli.app, ["search", "lofi"])

        assert result.exit_code == 1
        assert "Error: YouTube API quota exceeded. Please try again later." in result.output

        history = runner.invoke(cli.app, ["history", "show"])
        assert "No recent searches." in history.output

    def test_failed_load_more_keeps_first_page(self, api):
        def handler(request):
            if request.url.path == "/api/youtube/search":
                return httpx.Response(200, json=page_body(["a1"], next_href="T1"))
            return httpx.Response(503, json={"error": {"message": "Service unavailable", "status": 503}})

        api(handler)

        result = runner.invoke(cli.app, ["search", "lofi", "--pages", "2"])

        assert result.exit_code == 0
        assert "Error: Service unavailable" in result.output
        assert "Video a1" in result.output


class TestHistoryCommands:
    """tunesearch history ..."""

    def seed(self, api, *queries):
        api(lambda request: httpx.Response(200, json=page_body(["a"])))
        for query in queries:
            assert runner.invoke(cli.app, ["search", query]).exit_code == 0

    def test_empty(self):
        result = runner.invoke(cli.app, ["history", "show"])

        assert result.exit_code == 0
        assert "No recent searches." in result.output

    def test_most_recent_first_and_case_dedup(self, api):
        self.seed(api, "jazz", "rock", "JAZZ")

        result = runner.invoke(cli.app, ["history", "show"])

        assert "1. JAZZ" in result.output
        assert "2. rock" in result.output
        assert "(2/5)" in result.output

    def test_remove(self, api):
        self.seed(api, "jazz", "rock")

        result = runner.invoke(cli.app, ["history", "remove", "Jazz"])

        assert result.exit_code == 0
        assert "jazz" not in result.output
        assert "1. rock" in result.output

    def test_move(self, api):
        self.seed(api, "a", "b", "c")

        result = runner.invoke(cli.app, ["history", "move", "a", "1"])

        assert result.exit_code == 0
        assert "1. a" in result.output
        assert "2. c" in result.output
        assert "3. b" in result.output

    def test_move_unknown_query(self, api):
        self.seed(api, "a")

        result = runner.invoke(cli.app, ["history", "move", "zzz", "1"])

        assert result.exit_code == 1

    def test_limit_truncates(self, api):
        self.seed(api, "a", "b", "c")

        result = runner.invoke(cli.app, ["history", "limit", "2"])

        assert result.exit_code == 0
        assert "(2/2)" in result.output
        assert "1. c" in result.output
        assert "2. b" in result.output

    def test_limit_is_clamped(self, api):
        self.seed(api, "a")

        result = runner.invoke(cli.app, ["history", "limit", "500"])

        assert result.exit_code == 0
        assert "(1/50)" in result.output

    def test_clear(self, api):
        self.seed(api, "a", "b")

        result = runner.invoke(cli.app, ["history", "clear"])

        assert "Search history cleared." in result.output
        assert "No recent searches." in runner.invoke(cli.app, ["history", "show"]).output


class TestFormatCard:
    """Result card rendering."""

    def test_long_description_is_shortened(self):
        card = cli.format_card(1, normalize_proxy_track(track("x")))

        lines = card.splitlines()
        assert lines[0] == "  1. Video x"
        assert lines[-1].endswith("...")
        assert len(lines[-1].strip()) == 100
