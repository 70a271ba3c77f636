import logging
from typing import List, Optional, Tuple

from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services.cache_service import PreviewCache
from preview_api.services.external_clients.http_client import UpstreamHttpClient
from preview_api.services.external_clients.youtube_client import YouTubeDataClient
from preview_api.services.resolvers.base_resolver import PlatformResolver, Strategy
from preview_api.services.resolvers.generic_resolver import GenericResolver
from preview_api.utils.platform_ids import extract_youtube_video_id

logger = logging.getLogger(__name__)


class YouTubeResolver(PlatformResolver):
    platform = Platform.YOUTUBE

    def __init__(
        self,
        http: UpstreamHttpClient,
        platform_cache: PreviewCache,
        youtube_client: YouTubeDataClient,
        generic_resolver: GenericResolver,
    ):
        super().__init__(http, platform_cache)
        self.youtube_client = youtube_client
        self.generic_resolver = generic_resolver

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [("data-api", self.from_data_api)]

    async def fallback(self, url: str) -> ResolvedMetadata:
        # no scraping of our own, the page goes through the generic extractor
        return await self.generic_resolver.resolve(url)

    async def from_data_api(self, url: str) -> Optional[ResolvedMetadata]:
        if not self.youtube_client.enabled:
            logger.debug("YouTube API key not configured, skipping data API")
            return None

        video_id = extract_youtube_video_id(url)
        if not video_id:
            return None

        async def load() -> Optional[ResolvedMetadata]:
            video = await self.youtube_client.get_video(video_id)
            if video is None:
                return None
            return ResolvedMetadata(
                title=video.snippet.title,
                description=video.snippet.description,
                image_url=video.snippet.best_thumbnail()
                or f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg",
                favicon_url="https://www.youtube.com/favicon.ico",
                site_name="YouTube",
                has_video_media=True,
                author=video.snippet.channel_title,
                channel=video.snippet.channel_title,
                view_count=video.statistics.view_count,
                like_count=video.statistics.like_count,
                published_at=video.snippet.published_at,
            )

        return await self.cached(f"youtube:api:{video_id}", load)
