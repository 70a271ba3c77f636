"""
Read-through caches for link previews.

Two tiers share this module:

* the preview cache holds finished ``LinkPreview`` payloads per URL (short TTL)
* platform caches hold raw upstream results per API call / scrape (long TTL)

Both are best-effort. Entries only live in the selected backend (process memory
by default, Redis when configured) and may disappear at any time.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from cachetools import TTLCache
from redis import asyncio as aioredis

from preview_api.models.cache_entry import CacheEntry

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class CacheBackend(ABC):
    """Storage for cache entries. Freshness is decided by PreviewCache, not here."""

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheEntry]:
        pass

    @abstractmethod
    async def set(self, key: str, entry: CacheEntry) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        pass

    async def ping(self) -> bool:
        return True


class InMemoryCacheBackend(CacheBackend):
    def __init__(self, maxsize: int, ttl_seconds: float, clock: Clock = time.time):
        # TTLCache evicts on its own clock, so bounded memory and freshness agree
        self._entries = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=clock)

    async def get(self, key: str) -> Optional[CacheEntry]:
        return self._entries.get(key)

    async def set(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class RedisCacheBackend(CacheBackend):
    def __init__(self, client: aioredis.Redis, namespace: str, ttl_seconds: float):
        self.client = client
        self.namespace = namespace
        self.ttl_seconds = max(1, int(ttl_seconds))

    def _key(self, key: str) -> str:
        return f"link-preview:{self.namespace}:{key}"

    async def get(self, key: str) -> Optional[CacheEntry]:
        raw = await self.client.get(self._key(key))
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Dropping unreadable cache entry {key}: {e}")
            await self.delete(key)
            return None

    async def set(self, key: str, entry: CacheEntry) -> None:
        await self.client.set(
            self._key(key), entry.model_dump_json(), ex=self.ttl_seconds
        )

    async def delete(self, key: str) -> None:
        await self.client.delete(self._key(key))

    async def ping(self) -> bool:
        return bool(await self.client.ping())


class PreviewCache:
    def __init__(
        self,
        backend: CacheBackend,
        ttl_seconds: float,
        name: str = "preview",
        clock: Clock = time.time,
    ):
        self.backend = backend
        self.ttl_seconds = ttl_seconds
        self.name = name
        self.clock = clock

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.timestamp < self.ttl_seconds

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        entry = await self.backend.get(key)
        if entry is None:
            return None
        if not self._is_fresh(entry):
            await self.backend.delete(key)
            return None
        return entry

    async def get(self, key: str) -> Optional[Any]:
        entry = await self.get_entry(key)
        if entry is None:
            return None
        logger.debug(f"{self.name} cache hit for {key}")
        return entry.data

    async def has(self, key: str) -> bool:
        return await self.get_entry(key) is not None

    async def set(self, key: str, data: Any) -> CacheEntry:
        # round-trip through JSON so memory and Redis hand back the same shapes
        entry = CacheEntry(data=json.loads(json.dumps(data)), timestamp=self.clock())
        await self.backend.set(key, entry)
        return entry

    async def delete(self, key: str) -> None:
        await self.backend.delete(key)
