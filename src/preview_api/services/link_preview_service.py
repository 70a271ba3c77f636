import logging
import time
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import SplitResult

import httpx
import structlog

from preview_api.common.errors import (
    InvalidURLError,
    LinkPreviewError,
    MissingURLError,
    UpstreamStatusError,
)
from preview_api.configurations.config import settings
from preview_api.models.link_preview_data import LinkPreview, Platform, ResolvedMetadata
from preview_api.models.link_preview_request import LinkPreviewResult
from preview_api.services import safety_filter, video_classifier
from preview_api.services.cache_service import (
    CacheBackend,
    InMemoryCacheBackend,
    PreviewCache,
    RedisCacheBackend,
)
from preview_api.services.embed_url_builder import EmbedUrlBuilder
from preview_api.services.external_clients.http_client import (
    UpstreamHttpClient,
    create_http_client,
)
from preview_api.services.external_clients.rumble_client import RumbleClient
from preview_api.services.external_clients.x_client import XClient
from preview_api.services.external_clients.youtube_client import YouTubeDataClient
from preview_api.services.platform_classifier import classify_platform
from preview_api.services.rate_limiter import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitStore,
    RedisRateLimitStore,
)
from preview_api.services.redis_service import get_async_redis_client
from preview_api.services.resolvers.base_resolver import PlatformResolver
from preview_api.services.resolvers.generic_resolver import GenericResolver
from preview_api.services.resolvers.odysee_resolver import OdyseeResolver
from preview_api.services.resolvers.rumble_resolver import RumbleResolver
from preview_api.services.resolvers.telegram_resolver import TelegramResolver
from preview_api.services.resolvers.x_resolver import XResolver
from preview_api.services.resolvers.youtube_resolver import YouTubeResolver
from preview_api.utils.url_utils import extract_urls, host_matches, parse_http_url

logger = logging.getLogger(__name__)


class LinkPreviewService:
    """
    Entry point of the preview engine.

    A request moves through validate -> safety check -> rate limit -> cache
    lookup -> classify -> resolve -> normalize -> cache store. The first three
    steps end the request with an error. After that platform failures turn into
    stub previews, only a failed download on the generic path is an error.
    """

    def __init__(
        self,
        http: UpstreamHttpClient,
        preview_cache: PreviewCache,
        platform_cache: PreviewCache,
        rate_limiter: RateLimiter,
        embed_builder: EmbedUrlBuilder,
        youtube_client: YouTubeDataClient,
        x_client: XClient,
        rumble_client: RumbleClient,
        clock: Callable[[], float] = time.time,
    ):
        self.http = http
        self.preview_cache = preview_cache
        self.platform_cache = platform_cache
        self.rate_limiter = rate_limiter
        self.embed_builder = embed_builder
        self.rumble_client = rumble_client
        self.clock = clock

        generic = GenericResolver(http, platform_cache)
        self.resolvers: Dict[Optional[Platform], PlatformResolver] = {
            None: generic,
            Platform.YOUTUBE: YouTubeResolver(
                http, platform_cache, youtube_client, generic
            ),
            Platform.X: XResolver(http, platform_cache, x_client),
            Platform.RUMBLE: RumbleResolver(http, platform_cache, rumble_client),
            Platform.ODYSEE: OdyseeResolver(http, platform_cache),
            Platform.TELEGRAM: TelegramResolver(http, platform_cache),
        }

    def _now_iso(self) -> str:
        return datetime.fromtimestamp(self.clock(), tz=timezone.utc).isoformat()

    async def fetch_link_preview(self, raw_url: Any, client_id: str) -> LinkPreview:
        if raw_url is None or (isinstance(raw_url, str) and not raw_url.strip()):
            raise MissingURLError()
        if not isinstance(raw_url, str):
            raise InvalidURLError()

        url = raw_url.strip()
        parsed = safety_filter.parse_url(url)
        safety_filter.ensure_allowed(parsed)
        await self.rate_limiter.check(client_id)

        if safety_filter.is_image_url(parsed):
            logger.info(f"Image URL {url}, skipping resolution")
            return self._image_preview(url, parsed)

        cached = await self.preview_cache.get(url)
        if cached is not None:
            return LinkPreview.model_validate(cached)

        platform = classify_platform(parsed.hostname)
        with structlog.contextvars.bound_contextvars(
            platform=platform.value if platform else "generic", preview_url=url
        ):
            logger.info(f"Fetching link preview for {url} (platform: {platform})")
            metadata = await self.resolvers[platform].resolve(url)
        preview = self._normalize(url, parsed, platform, metadata)

        # stubs are a fallback, the next request should try the upstreams again
        if not metadata.is_stub:
            await self.preview_cache.set(url, preview.model_dump(mode="json"))
        return preview

    def _image_preview(self, url: str, parsed: SplitResult) -> LinkPreview:
        return LinkPreview(
            url=url,
            title=None,
            description=None,
            image_url=None,
            domain=parsed.hostname,
            is_image=True,
            is_video=False,
            cached_at=self._now_iso(),
        )

    def _normalize(
        self,
        url: str,
        parsed: SplitResult,
        platform: Optional[Platform],
        metadata: ResolvedMetadata,
    ) -> LinkPreview:
        return LinkPreview(
            url=url,
            title=metadata.title or "",
            description=metadata.description or "",
            image_url=metadata.image_url or None,
            domain=parsed.hostname,
            favicon_url=metadata.favicon_url or None,
            is_video=video_classifier.is_video(url, metadata),
            embed_url=self.embed_builder.build(url, platform, metadata),
            platform=platform,
            author=metadata.author,
            site_name=metadata.site_name,
            channel=metadata.channel,
            view_count=metadata.view_count,
            like_count=metadata.like_count,
            published_at=metadata.published_at,
            cached_at=self._now_iso(),
        )

    async def fetch_link_previews_for_text(
        self, text: Optional[str], client_id: str
    ) -> List[LinkPreviewResult]:
        urls = extract_urls(text or "")[: settings.batch_max_urls]
        results = []
        for url in urls:
            try:
                preview = await self.fetch_link_preview(url, client_id)
                results.append(LinkPreviewResult(url=url, status=200, preview=preview))
            except LinkPreviewError as e:
                results.append(
                    LinkPreviewResult(url=url, status=e.status_code, error=e.message)
                )
            except Exception:
                logger.error(f"Unexpected error previewing {url}", exc_info=True)
                results.append(
                    LinkPreviewResult(
                        url=url, status=500, error=LinkPreviewError.message
                    )
                )
        return results

    async def proxy_rumble_oembed(self, url: Optional[str]) -> Dict[str, Any]:
        """Rumble's oEmbed payload, unchanged, for clients that render it themselves."""
        if not url:
            raise MissingURLError("Missing url parameter")
        parsed = parse_http_url(url)
        if parsed is None:
            raise InvalidURLError("Invalid url parameter")
        if not host_matches(parsed.hostname, "rumble.com"):
            raise InvalidURLError("Only rumble.com URLs are supported")

        cache_key = f"rumble:oembed-raw:{url}"
        cached = await self.platform_cache.get(cache_key)
        if cached is not None:
            return cached

        response = await self.rumble_client.get_oembed_response(url)
        if not response.is_success:
            logger.warning(f"Rumble oEmbed returned {response.status_code} for {url}")
            raise UpstreamStatusError(response.status_code)

        payload = response.json()
        await self.platform_cache.set(cache_key, payload)
        return payload

    async def aclose(self) -> None:
        await self.http.aclose()


def _cache_backend(name: str, maxsize: int, ttl: float, clock) -> CacheBackend:
    if settings.cache_backend == "redis":
        return RedisCacheBackend(get_async_redis_client(), name, ttl)
    return InMemoryCacheBackend(maxsize=maxsize, ttl_seconds=ttl, clock=clock)


def _rate_limit_store(clock) -> RateLimitStore:
    if settings.cache_backend == "redis":
        return RedisRateLimitStore(
            get_async_redis_client(), settings.rate_limit_window_seconds
        )
    return InMemoryRateLimitStore(settings.rate_limit_window_seconds, clock=clock)


def build_link_preview_service(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Callable[[], float] = time.time,
    public_origin: Optional[str] = None,
    youtube_api_key: Optional[str] = None,
    x_bearer_token: Optional[str] = None,
) -> LinkPreviewService:
    http = UpstreamHttpClient(create_http_client(transport))

    preview_cache = PreviewCache(
        _cache_backend(
            "preview",
            settings.preview_cache_size,
            settings.preview_cache_ttl_seconds,
            clock,
        ),
        ttl_seconds=settings.preview_cache_ttl_seconds,
        name="preview",
        clock=clock,
    )
    platform_cache = PreviewCache(
        _cache_backend(
            "platform",
            settings.platform_cache_size,
            settings.platform_cache_ttl_seconds,
            clock,
        ),
        ttl_seconds=settings.platform_cache_ttl_seconds,
        name="platform",
        clock=clock,
    )
    rate_limiter = RateLimiter(
        _rate_limit_store(clock),
        limit=settings.rate_limit_requests,
        window_seconds=settings.rate_limit_window_seconds,
        clock=clock,
    )

    return LinkPreviewService(
        http=http,
        preview_cache=preview_cache,
        platform_cache=platform_cache,
        rate_limiter=rate_limiter,
        embed_builder=EmbedUrlBuilder(public_origin or settings.public_origin),
        youtube_client=YouTubeDataClient(
            http, youtube_api_key or settings.youtube_api_key
        ),
        x_client=XClient(http, x_bearer_token or settings.x_bearer_token),
        rumble_client=RumbleClient(http),
        clock=clock,
    )


@lru_cache()
def get_link_preview_service() -> LinkPreviewService:
    logger.info("Initializing LinkPreviewService (should happen once)")
    return build_link_preview_service()


async def get_link_preview_dependency() -> LinkPreviewService:
    return get_link_preview_service()
