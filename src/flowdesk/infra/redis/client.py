"""Redis client for flowdesk.

This module provides an async Redis wrapper used as the durable
key/value store behind the blob gateways. Unlike a cache, the store
must not hide failures: every error surfaces as PersistenceError.
"""

from typing import TYPE_CHECKING, Any

from flowdesk.config import RedisSettings
from flowdesk.errors import PersistenceError
from flowdesk.interfaces.storage import KeyValueStoreInterface
from flowdesk.logging import get_logger
from flowdesk.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from redis.asyncio import Redis

__all__ = [
    "RedisKeyValueStore",
]

logger = get_logger(__name__)

get_async_redis = lazy_import("redis.asyncio", "Redis")


class RedisKeyValueStore(KeyValueStoreInterface):
    """Async Redis implementation of KeyValueStoreInterface.

    Example:
        store = RedisKeyValueStore(settings)
        await store.connect()
        await store.set("rssFeeds", "[]")
        value = await store.get("rssFeeds")
        await store.disconnect()
    """

    def __init__(self, settings: RedisSettings, redis: "Redis | None" = None) -> None:
        """Initialize store with settings.

        Args:
            settings: Redis connection settings
            redis: Already constructed client, mostly for tests
        """
        self._settings = settings
        self._redis = redis

    @property
    def is_connected(self) -> bool:
        return self._redis is not None

    def _key(self, key: str) -> str:
        return f"{self._settings.key_prefix}{key}"

    async def connect(self) -> None:
        """Open the connection and verify it with PING."""
        if self._redis is not None:
            return

        Redis = get_async_redis()  # noqa: N806
        client = Redis.from_url(self._settings.url, decode_responses=True)
        try:
            await client.ping()
        except Exception as e:
            await client.aclose()
            raise PersistenceError(f"Cannot connect to Redis: {e}") from e
        self._redis = client
        logger.info("connected_to_redis", url=self._settings.url)

    async def disconnect(self) -> None:
        """Close connection to Redis."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("disconnected_from_redis")

    def _client(self) -> "Redis":
        if self._redis is None:
            raise PersistenceError("Redis store not connected. Call connect() first.")
        return self._redis

    async def get(self, key: str) -> str | None:
        """Get the value stored under key.

        Raises:
            PersistenceError: If Redis is unreachable or not connected
        """
        client = self._client()
        try:
            return await client.get(self._key(key))
        except Exception as e:
            logger.error("redis_get_error", key=key, error=str(e))
            raise PersistenceError(f"Redis GET '{key}' failed: {e}") from e

    async def set(self, key: str, value: str) -> None:
        """Store value under key.

        Raises:
            PersistenceError: If Redis is unreachable or not connected
        """
        client = self._client()
        try:
            await client.set(self._key(key), value)
        except Exception as e:
            logger.error("redis_set_error", key=key, error=str(e))
            raise PersistenceError(f"Redis SET '{key}' failed: {e}") from e

    async def __aenter__(self) -> "RedisKeyValueStore":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
