"""
SimpleCache测试 - 使用模拟Redis客户端
"""

import json
import pytest
from unittest.mock import AsyncMock

from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.common_cache import SimpleCache


@pytest.mark.asyncio
class TestSimpleCache:
    """SimpleCache测试类"""

    @pytest.fixture
    def redis_client(self):
        client = AsyncMock()
        client.get.return_value = None
        client.setex.return_value = True
        client.ping.return_value = True
        return client

    @pytest.fixture
    def cache(self, redis_client):
        return SimpleCache(redis_client, key_prefix="store:", default_ttl=60)

    async def test_get_hit(self, cache, redis_client):
        redis_client.get.return_value = json.dumps({"autoApply": True})

        assert await cache.get("settings:coupon") == {"autoApply": True}
        redis_client.get.assert_called_once_with("store:settings:coupon")

    async def test_get_miss(self, cache):
        assert await cache.get("settings:coupon") is None

    async def test_set_uses_ttl(self, cache, redis_client):
        assert await cache.set("settings:coupon", {"autoApply": False}, ttl=300) is True
        redis_client.setex.assert_called_once_with("store:settings:coupon", 300, '{"autoApply": false}')

    async def test_set_default_ttl(self, cache, redis_client):
        await cache.set("k", 1)
        assert redis_client.setex.call_args.args[1] == 60

    async def test_errors_treated_as_miss(self, cache, redis_client):
        """Redis故障时按未命中处理，不影响业务"""
        redis_client.get.side_effect = RedisConnectionError("down")
        redis_client.setex.side_effect = RedisConnectionError("down")
        redis_client.ping.side_effect = RedisConnectionError("down")

        assert await cache.get("k") is None
        assert await cache.set("k", 1) is False
        assert await cache.ping() is False

    async def test_without_client(self):
        cache = SimpleCache()

        assert await cache.get("k") is None
        assert await cache.set("k", 1) is False
        assert await cache.ping() is False

    async def test_close(self, cache, redis_client):
        await cache.close_redis()
        redis_client.aclose.assert_called_once()
