"""
Redis connection used when CACHE_BACKEND=redis.

Preview caches and rate-limit windows are then shared between all instances
pointing at the same Redis. Nothing else in the service talks to Redis.
"""

import logging
from functools import lru_cache

from redis import asyncio as aioredis

from preview_api.configurations.config import settings

logger = logging.getLogger(__name__)


class RedisService:
    def __init__(self):
        logger.info("Creating async Redis connection pool")

        self.async_pool = aioredis.ConnectionPool(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            decode_responses=True,
            max_connections=10,
        )
        self._async_client = aioredis.Redis(connection_pool=self.async_pool)
        logger.info("Redis client initialized successfully")

    @property
    def async_client(self) -> aioredis.Redis:
        return self._async_client

    async def aclose(self):
        """Only called during app shutdown"""
        logger.info("Closing async Redis connection pool")
        await self._async_client.aclose()


@lru_cache()
def get_redis_service() -> RedisService:
    logger.info("Initializing RedisService (should happen once)")
    return RedisService()


def get_async_redis_client() -> aioredis.Redis:
    return get_redis_service().async_client
