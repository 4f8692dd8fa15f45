from typing import Any

import redis.asyncio as redis
from loguru import logger

from explorer.core.config import settings


class RedisService:
    """Best-effort key/value persistence for filter facets. Failures are logged, never raised."""

    def __init__(self, url: str | None = None) -> None:
        self._url = url or settings.REDIS_URL
        self._client: redis.Redis | None = None
        if not self._url:
            logger.warning("REDIS_URL is not set. Filter persistence will fail until configured.")

    async def get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating Redis client for filter persistence")
            self._client = redis.from_url(
                self._url,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=settings.REDIS_MAX_CONNECTIONS,
                health_check_interval=30,
                socket_keepalive=True,
            )
        return self._client

    async def set(self, key: str, value: Any) -> bool:
        """Store a string value.

        Returns:
            True if successful, False otherwise
        """
        try:
            client = await self.get_client()
            result = await client.set(key, str(value))
            return bool(result)
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to set key '{key}' in Redis: {exc}")
            return False

    async def get(self, key: str) -> str | None:
        """Get a value by key.

        Returns:
            The value as a string, or None if the key doesn't exist or an error occurred
        """
        try:
            client = await self.get_client()
            return await client.get(key)
        except (redis.RedisError, OSError) as exc:
            logger.error(f"Failed to get key '{key}' from Redis: {exc}")
            return None

    async def close(self) -> None:
        """Close and disconnect the Redis client"""
        if self._client is not None:
            try:
                await self._client.aclose()
                logger.info("RedisService client closed")
            except (redis.RedisError, OSError) as exc:
                logger.warning(f"Failed to close RedisService client: {exc}")
            finally:
                self._client = None


redis_service = RedisService()
