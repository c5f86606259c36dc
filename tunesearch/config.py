"""
TuneSearch Configuration System

Hierarchical configuration with environment variable overrides.
Uses Pydantic Settings for type validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional, Literal
import os

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml


class YouTubeConfig(BaseSettings):
    """YouTube Data API configuration."""

    api_key: str = ""
    base_url: str = "https://www.googleapis.com/youtube/v3"
    timeout: float = 10.0
    category_id: str = "10"  # Music
    order: str = "relevance"
    max_total_results: int = 1000  # YouTube never pages past this

    model_config = SettingsConfigDict(env_prefix="TUNESEARCH_YOUTUBE_")

    @model_validator(mode="after")
    def _legacy_key(self) -> "YouTubeConfig":
        # Legacy variable name used by existing deployments
        if not self.api_key:
            self.api_key = os.environ.get("YOU_TUBE_API_KEY", "")
        return self


class SoundCloudConfig(BaseSettings):
    """Legacy SoundCloud API configuration."""

    client_id: str = ""
    base_url: str = "https://api.soundcloud.com"
    timeout: float = 10.0

    model_config = SettingsConfigDict(env_prefix="TUNESEARCH_SOUNDCLOUD_")

    @model_validator(mode="after")
    def _legacy_client_id(self) -> "SoundCloudConfig":
        if not self.client_id:
            self.client_id = os.environ.get("SOUNDCLOUD_CLIENT_ID", "")
        return self


class HistoryConfig(BaseSettings):
    """Local search history configuration."""

    provider: Literal["sqlite", "memory"] = "sqlite"
    database: str = "data/history.db"
    default_limit: int = Field(default=5, ge=1, le=50)

    model_config = SettingsConfigDict(env_prefix="TUNESEARCH_HISTORY_")


class ClientConfig(BaseSettings):
    """Terminal client configuration."""

    api_url: str = "http://127.0.0.1:3001"
    page_size: int = Field(default=6, ge=1, le=50)
    timeout: float = 10.0

    model_config = SettingsConfigDict(env_prefix="TUNESEARCH_CLIENT_")


class APIConfig(BaseSettings):
    """API server configuration."""

    host: str = "127.0.0.1"
    port: int = 3001
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    service_name: str = "YouTube Music Search API"

    model_config = SettingsConfigDict(env_prefix="TUNESEARCH_API_")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    json_format: bool = False

    model_config = SettingsConfigDict(env_prefix="TUNESEARCH_LOG_")


class Settings(BaseSettings):
    """
    Main application settings.

    Configuration priority (highest to lowest):
    1. Environment variables (TUNESEARCH_*)
    2. .env file
    3. Config YAML file
    4. Default values
    """

    app_name: str = "TuneSearch"
    version: str = "1.0.0"
    environment: Literal["development", "production", "test"] = "development"

    # Sub-configurations
    youtube: YouTubeConfig = Field(default_factory=YouTubeConfig)
    soundcloud: SoundCloudConfig = Field(default_factory=SoundCloudConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="TUNESEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from a YAML file."""
        if not path.exists():
            return cls()

        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration with proper precedence.

    Args:
        config_path: Optional path to YAML config file.
                    If not provided, checks TUNESEARCH_CONFIG_PATH,
                    then falls back to config/default.yaml
    """
    if config_path is None:
        config_path = os.environ.get("TUNESEARCH_CONFIG_PATH")

    if config_path is None:
        env = os.environ.get("TUNESEARCH_ENVIRONMENT", "development")
        possible_paths = [
            Path(f"config/{env}.yaml"),
            Path("config/default.yaml"),
        ]
        for p in possible_paths:
            if p.exists():
                config_path = str(p)
                break

    if config_path and Path(config_path).exists():
        settings = Settings.from_yaml(Path(config_path))
    else:
        settings = Settings()

    return settings


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Use this as the primary way to access settings throughout the app.
    The settings are cached after first load.
    """
    return load_config()


# Convenience function to clear cache (useful for testing)
def clear_settings_cache():
    """Clear the settings cache."""
    get_settings.cache_clear()
