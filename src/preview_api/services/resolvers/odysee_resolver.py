from typing import List, Optional, Tuple

from preview_api.configurations.config import settings
from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services import meta_extractor
from preview_api.services.og_service import fetch_html, metadata_from_html
from preview_api.services.resolvers.base_resolver import PlatformResolver, Strategy
from preview_api.utils.platform_ids import extract_odysee_channel

ODYSEE_EMBED_FRAGMENT = "odysee.com/$/embed/"


class OdyseeResolver(PlatformResolver):
    """Odysee has no oEmbed endpoint, the page's own meta tags are all we get."""

    platform = Platform.ODYSEE

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [("scrape", self.from_scrape)]

    def stub(self, url: str) -> ResolvedMetadata:
        channel = extract_odysee_channel(url)
        return ResolvedMetadata(
            title=f"Odysee video by {channel}" if channel else "Odysee video",
            description="Watch this video on Odysee",
            site_name="Odysee",
            has_video_media=True,
            channel=channel,
            is_stub=True,
        )

    async def from_scrape(self, url: str) -> Optional[ResolvedMetadata]:
        async def load() -> Optional[ResolvedMetadata]:
            page = meta_extractor.Page(
                await fetch_html(
                    self.http,
                    url,
                    settings.bot_user_agent,
                    settings.scrape_timeout_seconds,
                )
            )
            metadata = metadata_from_html(page, url)
            if not metadata.title:
                return None

            player = metadata.video_tags.get("twitter:player") or metadata.video_tags.get(
                "og:video:url"
            )
            embed_url = (
                meta_extractor.extract_iframe_src(page, ODYSEE_EMBED_FRAGMENT)
                or meta_extractor.extract_embed_url(page)
                or (player if player and "/$/embed/" in player else None)
            )

            # the embed URL builder synthesizes one from the video ID when this is None
            metadata.embed_url = embed_url
            metadata.channel = extract_odysee_channel(url)
            metadata.author = metadata.channel
            metadata.site_name = metadata.site_name or "Odysee"
            metadata.has_video_media = True
            return metadata

        return await self.cached(f"odysee:scrape:{url}", load)
