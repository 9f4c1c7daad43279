"""
Cache service for OAuth request-token secrets.
"""

from datetime import timedelta
from typing import Any, Optional, Union

from keymesh_proxy.core.logging import get_logger
from keymesh_proxy.infrastructure.cache.redis_client import RedisClient, get_redis_client

logger = get_logger(__name__)


class CacheService:
    """High-level cache service."""

    def __init__(self, redis_client: Optional[RedisClient] = None):
        """Initialize cache service."""
        self._redis_client = redis_client

    async def _get_client(self) -> RedisClient:
        """Get Redis client instance."""
        if not self._redis_client:
            self._redis_client = await get_redis_client()
        return self._redis_client

    async def get(self, key: str) -> Optional[Any]:
        """Get value from cache."""
        client = await self._get_client()
        return await client.get(key)

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[Union[int, timedelta]] = None
    ) -> bool:
        """Set value in cache."""
        client = await self._get_client()
        return await client.set(key, value, expire)

    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        client = await self._get_client()
        return await client.delete(key)

    async def pop(self, key: str) -> Optional[Any]:
        """
        Get a value and remove it atomically, for one-time values such as
        OAuth request-token secrets.

        Args:
            key (str): Cache key

        Returns:
            Optional[Any]: The stored value or None
        """
        client = await self._get_client()
        return await client.getdel(key)


# Global cache service instance
cache_service = CacheService()
