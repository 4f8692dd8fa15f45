from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from explorer.core.version import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production", "test"] = "production"

    REDIS_URL: str = "redis://localhost:6379/0"
    # Maximum number of connections Redis client will open per process
    REDIS_MAX_CONNECTIONS: int = 20
    # Every persisted facet lives under <prefix><namespace>:<facet key>
    FILTER_KEY_PREFIX: str = "explore:"

    # Content-search endpoint
    EXPLORE_API_URL: str = "http://localhost:5000"
    EXPLORE_PATH: str = "/api/posts/explore"
    EXPLORE_PAGE_SIZE: int = 24
    EXPLORE_TIMEOUT_SECONDS: float = 10.0
    # Path to a JSON array of items; when set the feed filters locally instead of calling the endpoint
    EXPLORE_LOCAL_DATA: str | None = None

    # Feed cache
    FEED_STALE_SECONDS: float = 30.0
    FEED_CACHE_MAX_KEYS: int = 64
    FEED_CACHE_TTL_SECONDS: float = 300.0  # inactive partitions are dropped after 5 minutes


settings = Settings()
