import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

from cachetools import TTLCache
from redis import asyncio as aioredis

from preview_api.common.errors import RateLimitedError
from preview_api.models.cache_entry import RateLimitEntry

logger = logging.getLogger(__name__)


class RateLimitStore(ABC):
    @abstractmethod
    async def get(self, client_id: str) -> Optional[RateLimitEntry]:
        pass

    @abstractmethod
    async def set(self, client_id: str, entry: RateLimitEntry) -> None:
        pass


class InMemoryRateLimitStore(RateLimitStore):
    def __init__(
        self,
        window_seconds: float,
        maxsize: int = 10000,
        clock: Callable[[], float] = time.time,
    ):
        # entries outlive their window by one window so reset checks still see them
        self._entries = TTLCache(maxsize=maxsize, ttl=window_seconds * 2, timer=clock)

    async def get(self, client_id: str) -> Optional[RateLimitEntry]:
        return self._entries.get(client_id)

    async def set(self, client_id: str, entry: RateLimitEntry) -> None:
        self._entries[client_id] = entry


class RedisRateLimitStore(RateLimitStore):
    def __init__(self, client: aioredis.Redis, window_seconds: float):
        self.client = client
        self.expire_seconds = max(1, int(window_seconds * 2))

    @staticmethod
    def _key(client_id: str) -> str:
        return f"link-preview:rate-limit:{client_id}"

    async def get(self, client_id: str) -> Optional[RateLimitEntry]:
        raw = await self.client.get(self._key(client_id))
        if not raw:
            return None
        try:
            return RateLimitEntry.model_validate_json(raw)
        except ValueError as e:
            # treated as no window, the next set overwrites it
            logger.warning(f"Unreadable rate limit entry for {client_id}: {e}")
            return None

    async def set(self, client_id: str, entry: RateLimitEntry) -> None:
        await self.client.set(
            self._key(client_id), entry.model_dump_json(), ex=self.expire_seconds
        )


class RateLimiter:
    """Fixed-window request counter per client identifier."""

    def __init__(
        self,
        store: RateLimitStore,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock

    async def allow(self, client_id: str) -> bool:
        now = self.clock()
        entry = await self.store.get(client_id)

        if entry is None or now > entry.reset_time:
            await self.store.set(
                client_id,
                RateLimitEntry(count=1, reset_time=now + self.window_seconds),
            )
            return True

        if entry.count >= self.limit:
            return False

        await self.store.set(
            client_id,
            RateLimitEntry(count=entry.count + 1, reset_time=entry.reset_time),
        )
        return True

    async def check(self, client_id: str) -> None:
        if not await self.allow(client_id):
            logger.warning(f"Rate limit exceeded for client {client_id}")
            raise RateLimitedError()
