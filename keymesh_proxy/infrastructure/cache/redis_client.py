"""
Redis client for short-lived OAuth state.
Handles connection management, JSON serialization, and error handling.
"""

import json
from datetime import timedelta
from typing import Any, Optional, Union

import redis.asyncio as redis
from redis.exceptions import RedisError

from keymesh_proxy.core.config import settings
from keymesh_proxy.core.exceptions import CacheError
from keymesh_proxy.core.logging import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Redis client with JSON serialization support."""

    def __init__(self):
        """Initialize Redis client."""
        self._client: Optional[redis.Redis] = None
        self._connection_pool: Optional[redis.ConnectionPool] = None

    async def connect(self) -> None:
        """
        Establish connection to Redis server.

        Raises:
            CacheError: If Redis is unreachable
        """
        try:
            self._connection_pool = redis.ConnectionPool.from_url(
                settings.REDIS_URI,
                db=settings.REDIS_DB,
                decode_responses=True,
                max_connections=20,
            )
            self._client = redis.Redis(connection_pool=self._connection_pool)

            await self._client.ping()
            logger.info(f"Connected to Redis at {settings.REDIS_URI}")

        except RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._client = None
            raise CacheError(f"Cannot connect to Redis: {e}")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from Redis")

    @staticmethod
    def _deserialize(value: Optional[str]) -> Optional[Any]:
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    async def get(self, key: str) -> Optional[Any]:
        """
        Get value from Redis.

        Args:
            key (str): Cache key

        Returns:
            Optional[Any]: Deserialized value or None if not found

        Raises:
            CacheError: If the Redis call fails
        """
        if not self._client:
            await self.connect()

        try:
            value = await self._client.get(key)
        except RedisError as e:
            logger.error(f"Error getting key {key} from Redis: {e}")
            raise CacheError(f"Failed to get key: {key}")

        if value is None:
            logger.debug(f"Cache miss for key: {key}")
        return self._deserialize(value)

    async def getdel(self, key: str) -> Optional[Any]:
        """
        Get a value and delete it in one atomic GETDEL.

        Raises:
            CacheError: If the Redis call fails
        """
        if not self._client:
            await self.connect()

        try:
            value = await self._client.getdel(key)
        except RedisError as e:
            logger.error(f"Error consuming key {key} from Redis: {e}")
            raise CacheError(f"Failed to consume key: {key}")

        return self._deserialize(value)

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[Union[int, timedelta]] = None
    ) -> bool:
        """
        Set value in Redis.

        Args:
            key (str): Cache key
            value (Any): Value to store (will be JSON serialized)
            expire (Optional[Union[int, timedelta]]): Expiration time in seconds or timedelta

        Returns:
            bool: True if Redis acknowledged the write

        Raises:
            CacheError: If the Redis call fails
        """
        if not self._client:
            await self.connect()

        serialized_value = json.dumps(value, default=str)
        try:
            result = await self._client.set(key, serialized_value, ex=expire)
        except RedisError as e:
            logger.error(f"Error setting key {key} in Redis: {e}")
            raise CacheError(f"Failed to set key: {key}")

        if result:
            logger.debug(f"Cache set for key: {key}")
            return True
        logger.warning(f"Failed to set cache for key: {key}")
        return False

    async def delete(self, key: str) -> bool:
        """
        Delete key from Redis.

        Returns:
            bool: True if key was deleted, False otherwise

        Raises:
            CacheError: If the Redis call fails
        """
        if not self._client:
            await self.connect()

        try:
            return bool(await self._client.delete(key))
        except RedisError as e:
            logger.error(f"Error deleting key {key} from Redis: {e}")
            raise CacheError(f"Failed to delete key: {key}")


# Global Redis client instance
redis_client = RedisClient()


async def get_redis_client() -> RedisClient:
    """
    Get Redis client instance.

    Returns:
        RedisClient: Redis client instance
    """
    if not redis_client._client:
        await redis_client.connect()
    return redis_client
