import logging
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from preview_api.configurations.config import settings
from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services import meta_extractor
from preview_api.services.cache_service import PreviewCache
from preview_api.services.external_clients.http_client import UpstreamHttpClient
from preview_api.services.external_clients.rumble_client import RumbleClient
from preview_api.services.og_service import fetch_html, metadata_from_html
from preview_api.services.resolvers.base_resolver import PlatformResolver, Strategy
from preview_api.utils.platform_ids import extract_rumble_video_id

logger = logging.getLogger(__name__)

RUMBLE_EMBED_FRAGMENT = "rumble.com/embed/"


def _iframe_src_from_oembed_html(html: Optional[str]) -> Optional[str]:
    if not html:
        return None
    iframe = BeautifulSoup(html, "html.parser").find("iframe")
    src = iframe.get("src") if iframe else None
    if src and src.startswith("//"):
        src = f"https:{src}"
    return src


class RumbleResolver(PlatformResolver):
    """
    Rumble watch pages: oEmbed first, then the page itself.

    The embed URL is only ever copied from Rumble's own data. Embed IDs differ
    from the IDs in watch-page paths, so one is never built from the URL.
    """

    platform = Platform.RUMBLE

    def __init__(
        self,
        http: UpstreamHttpClient,
        platform_cache: PreviewCache,
        rumble_client: RumbleClient,
    ):
        super().__init__(http, platform_cache)
        self.rumble_client = rumble_client

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [("oembed", self.from_oembed), ("scrape", self.from_scrape)]

    def stub(self, url: str) -> ResolvedMetadata:
        video_id = extract_rumble_video_id(url)
        return ResolvedMetadata(
            title=f"Rumble video {video_id}" if video_id else "Rumble video",
            description="Watch this video on Rumble",
            site_name="Rumble",
            has_video_media=True,
            is_stub=True,
        )

    async def from_oembed(self, url: str) -> Optional[ResolvedMetadata]:
        async def load() -> Optional[ResolvedMetadata]:
            data = await self.rumble_client.get_oembed(url)
            if not isinstance(data, dict) or not (data.get("title") or data.get("html")):
                return None
            return ResolvedMetadata(
                title=data.get("title"),
                description=data.get("description") or "",
                image_url=data.get("thumbnail_url"),
                site_name=data.get("provider_name") or "Rumble",
                embed_url=_iframe_src_from_oembed_html(data.get("html")),
                has_video_media=True,
                author=data.get("author_name"),
                channel=data.get("author_name"),
            )

        return await self.cached(f"rumble:oembed:{url}", load)

    async def from_scrape(self, url: str) -> Optional[ResolvedMetadata]:
        async def load() -> Optional[ResolvedMetadata]:
            page = meta_extractor.Page(
                await fetch_html(
                    self.http,
                    url,
                    settings.browser_user_agent,
                    settings.scrape_timeout_seconds,
                )
            )
            metadata = metadata_from_html(page, url)
            if not metadata.title and not metadata.image_url:
                return None

            embed_url = meta_extractor.extract_iframe_src(
                page, RUMBLE_EMBED_FRAGMENT
            ) or meta_extractor.extract_embed_url(page)
            if embed_url and RUMBLE_EMBED_FRAGMENT not in embed_url:
                logger.info(f"Ignoring non-Rumble embed URL {embed_url} on {url}")
                embed_url = None

            metadata.embed_url = embed_url
            metadata.site_name = metadata.site_name or "Rumble"
            metadata.has_video_media = True
            return metadata

        return await self.cached(f"rumble:scrape:{url}", load)
