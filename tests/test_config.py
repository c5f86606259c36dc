"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from tunesearch.config import (
    HistoryConfig,
    Settings,
    SoundCloudConfig,
    YouTubeConfig,
    get_settings,
    load_config,
)
from tunesearch.storage import InMemoryStore, SQLiteKeyValueStore, create_store


class TestDefaults:
    """Values used when nothing is configured."""

    def test_defaults(self):
        settings = Settings()

        assert settings.api.port == 3001
        assert settings.api.service_name == "YouTube Music Search API"
        assert settings.youtube.base_url == "https://www.googleapis.com/youtube/v3"
        assert settings.youtube.timeout == 10.0
        assert settings.youtube.category_id == "10"
        assert settings.youtube.api_key == ""
        assert settings.client.page_size == 6
        assert settings.history.default_limit == 5


class TestEnvironment:
    """Environment variable overrides."""

    def test_prefixed_key(self, monkeypatch):
        monkeypatch.setenv("TUNESEARCH_YOUTUBE_API_KEY", "prefixed")

        assert YouTubeConfig().api_key == "prefixed"

    def test_legacy_key_names(self, monkeypatch):
        monkeypatch.setenv("YOU_TUBE_API_KEY", "legacy-yt")
        monkeypatch.setenv("SOUNDCLOUD_CLIENT_ID", "legacy-sc")

        assert YouTubeConfig().api_key == "legacy-yt"
        assert SoundCloudConfig().client_id == "legacy-sc"

    def test_prefixed_key_wins_over_legacy(self, monkeypatch):
        monkeypatch.setenv("YOU_TUBE_API_KEY", "legacy")
        monkeypatch.setenv("TUNESEARCH_YOUTUBE_API_KEY", "prefixed")

        assert YouTubeConfig().api_key == "prefixed"

    def test_history_limit_bounds(self):
        with pytest.raises(ValidationError):
            HistoryConfig(default_limit=0)
        with pytest.raises(ValidationError):
            HistoryConfig(default_limit=51)


class TestYamlConfig:
    """YAML files and the settings cache."""

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("environment: production\napi:\n  port: 8080\nclient:\n  page_size: 12\n")

        settings = load_config(str(path))

        assert settings.environment == "production"
        assert settings.api.port == 8080
        assert settings.client.page_size == 12

    def test_environment_file_is_discovered(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "development.yaml").write_text("history:\n  provider: memory\n")

        assert load_config().history.provider == "memory"

    def test_missing_path_falls_back_to_defaults(self, tmp_path):
        settings = load_config(str(tmp_path / "absent.yaml"))

        assert settings.api.port == 3001

    def test_settings_are_cached(self):
        assert get_settings() is get_settings()


class TestStoreFactory:
    """History backend selection."""

    def test_memory(self):
        assert isinstance(create_store(HistoryConfig(provider="memory")), InMemoryStore)

    def test_sqlite(self, tmp_path):
        store = create_store(HistoryConfig(database=str(tmp_path / "h.db")))

        assert isinstance(store, SQLiteKeyValueStore)
