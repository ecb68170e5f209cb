import json
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.platform.cache.base import ResultCache
from app.platform.logger import get_logger

logger = get_logger(__name__)


class RedisCache(ResultCache):
    """Redis-backed cache; entries expire through Redis' own TTL.

    Redis failures degrade to a cache miss instead of failing the check.
    """

    def __init__(self, client: Redis, prefix: str = "pagespeed:"):
        self.redis = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        return cls(Redis.from_url(url, encoding="utf-8", decode_responses=True))

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        try:
            raw = await self.redis.get(self.prefix + key)
        except RedisError as e:
            logger.warning(f"Redis get failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Dropping undecodable cache entry {key}")
            await self.delete(key)
            return None

    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        try:
            await self.redis.set(self.prefix + key, json.dumps(value), ex=ttl)
        except RedisError as e:
            logger.warning(f"Redis set failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(self.prefix + key)
        except RedisError as e:
            logger.warning(f"Redis delete failed for {key}: {e}")

    async def close(self) -> None:
        await self.redis.aclose()
