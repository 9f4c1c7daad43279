"""
Cache infrastructure module.
Provides Redis-backed storage for short-lived OAuth state.
"""

from .redis_client import RedisClient, redis_client, get_redis_client
from .cache_service import CacheService, cache_service

__all__ = [
    "RedisClient",
    "redis_client",
    "get_redis_client",
    "CacheService",
    "cache_service",
]
