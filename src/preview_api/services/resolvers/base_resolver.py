import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Tuple

from preview_api.common.errors import UpstreamStrategyError
from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services.cache_service import PreviewCache
from preview_api.services.external_clients.http_client import UpstreamHttpClient

logger = logging.getLogger(__name__)

Strategy = Callable[[str], Awaitable[Optional[ResolvedMetadata]]]


class PlatformResolver(ABC):
    """
    Ordered strategy cascade for one platform.

    ``resolve`` tries each strategy in turn and returns the first result. A
    strategy that raises (network error, timeout, bad payload) or returns
    None only moves the cascade along. When every strategy came up empty the
    resolver's ``fallback`` produces the result, a URL-derived stub unless a
    subclass says otherwise.
    """

    platform: Optional[Platform] = None

    def __init__(self, http: UpstreamHttpClient, platform_cache: PreviewCache):
        self.http = http
        self.platform_cache = platform_cache

    @abstractmethod
    def strategies(self) -> List[Tuple[str, Strategy]]:
        pass

    def stub(self, url: str) -> ResolvedMetadata:
        return ResolvedMetadata(is_stub=True)

    async def fallback(self, url: str) -> ResolvedMetadata:
        return self.stub(url)

    async def resolve(self, url: str) -> ResolvedMetadata:
        for name, strategy in self.strategies():
            try:
                result = await strategy(url)
            except Exception as e:
                failure = UpstreamStrategyError(name, repr(e))
                logger.warning(f"{self._label} strategy failed for {url}: {failure}")
                continue

            if result is not None:
                logger.info(f"{self._label} resolved {url} via {name}")
                return result
            logger.info(f"{self._label} strategy {name} had nothing for {url}")

        logger.info(f"All {self._label} strategies exhausted for {url}, using fallback")
        return await self.fallback(url)

    async def cached(
        self, key: str, loader: Callable[[], Awaitable[Optional[ResolvedMetadata]]]
    ) -> Optional[ResolvedMetadata]:
        """Platform-cache read-through around one expensive upstream call."""
        hit = await self.platform_cache.get(key)
        if hit is not None:
            return ResolvedMetadata.model_validate(hit)

        result = await loader()
        if result is not None:
            await self.platform_cache.set(key, result.model_dump())
        return result

    @property
    def _label(self) -> str:
        return self.platform.value if self.platform else "generic"
