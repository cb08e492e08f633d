"""
通用缓存工具
基于Redis的简单TTL缓存，以实例方式注入到需要的服务中
注意：折扣记录本身不走缓存，每次评估都直接读取数据库
"""

import json
import logging
from typing import Optional, Any
import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)


class SimpleCache:
    """简单缓存管理器"""

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        key_prefix: str = "",
        default_ttl: int = 3600
    ):
        self.redis_client = redis_client
        self.key_prefix = key_prefix
        self.default_ttl = default_ttl

    async def init_redis(self) -> None:
        """初始化Redis连接"""
        if not self.redis_client:
            self.redis_client = redis.from_url(
                settings.redis_url_computed,
                encoding='utf-8',
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
                max_connections=20
            )

        # 测试连接
        try:
            await self.redis_client.ping()
            logger.info(f"{self.key_prefix}缓存Redis连接初始化成功")
        except Exception as e:
            logger.error(f"Redis连接失败: {e}")
            raise

    async def close_redis(self) -> None:
        """关闭Redis连接"""
        if self.redis_client:
            await self.redis_client.aclose()

    def _get_key(self, key: str) -> str:
        """获取完整的缓存key"""
        return f"{self.key_prefix}{key}" if self.key_prefix else key

    async def get(self, key: str) -> Optional[Any]:
        """获取缓存值，失败按未命中处理"""
        if not self.redis_client:
            return None

        try:
            data = await self.redis_client.get(self._get_key(key))

            if data:
                return json.loads(data)

            return None

        except Exception as e:
            logger.error(f"获取缓存失败 {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """设置缓存值"""
        if not self.redis_client:
            return False

        try:
            data = json.dumps(value, default=str, ensure_ascii=False)

            await self.redis_client.setex(self._get_key(key), ttl or self.default_ttl, data)
            return True

        except Exception as e:
            logger.error(f"设置缓存失败 {key}: {e}")
            return False

    async def ping(self) -> bool:
        """健康检查"""
        if not self.redis_client:
            return False
        try:
            return bool(await self.redis_client.ping())
        except Exception as e:
            logger.warning(f"Redis ping失败: {e}")
            return False
