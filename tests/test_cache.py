import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from keymesh_proxy.core.exceptions import CacheError
from keymesh_proxy.infrastructure.cache.cache_service import CacheService
from keymesh_proxy.infrastructure.cache.redis_client import RedisClient

pytestmark = pytest.mark.anyio


class FakeRedis:
    """In-memory subset of redis.asyncio.Redis with decode_responses=True."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.down = False

    def _check(self):
        if self.down:
            raise RedisConnectionError("connection refused")

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def getdel(self, key):
        self._check()
        return self.data.pop(key, None)

    async def set(self, key, value, ex=None):
        self._check()
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, key):
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    client = RedisClient()
    client._client = fake_redis
    return CacheService(client)


async def test_set_serializes_with_ttl(cache, fake_redis):
    assert await cache.set("token", "secret", expire=600) is True

    assert fake_redis.data["token"] == json.dumps("secret")
    assert fake_redis.ttls["token"] == 600
    assert await cache.get("token") == "secret"


async def test_pop_consumes_value_once(cache):
    await cache.set("token", "secret", expire=600)

    assert await cache.pop("token") == "secret"
    assert await cache.pop("token") is None
    assert await cache.get("token") is None


async def test_pop_uses_single_getdel(cache, fake_redis):
    calls = []
    original_getdel = fake_redis.getdel

    async def tracking_getdel(key):
        calls.append(key)
        return await original_getdel(key)

    async def forbidden(*args, **kwargs):
        raise AssertionError("pop must not split into get and delete")

    fake_redis.getdel = tracking_getdel
    fake_redis.get = forbidden
    fake_redis.delete = forbidden
    fake_redis.data["token"] = json.dumps("secret")

    assert await cache.pop("token") == "secret"
    assert calls == ["token"]


async def test_non_json_value_returned_raw(cache, fake_redis):
    fake_redis.data["raw"] = "not json"

    assert await cache.get("raw") == "not json"


@pytest.mark.parametrize("operation", ["get", "pop", "delete", "set"])
async def test_redis_failures_raise_cache_error(cache, fake_redis, operation):
    fake_redis.down = True

    with pytest.raises(CacheError):
        if operation == "set":
            await cache.set("token", "secret")
        else:
            await getattr(cache, operation)("token")
