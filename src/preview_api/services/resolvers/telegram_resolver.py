from typing import List, Optional, Tuple

from preview_api.configurations.config import settings
from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services.og_service import fetch_html, metadata_from_html
from preview_api.services.resolvers.base_resolver import PlatformResolver, Strategy
from preview_api.utils.platform_ids import extract_telegram_post


class TelegramResolver(PlatformResolver):
    platform = Platform.TELEGRAM

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [("scrape", self.from_scrape)]

    def stub(self, url: str) -> ResolvedMetadata:
        channel, _ = extract_telegram_post(url)
        return ResolvedMetadata(
            title=f"Telegram post from @{channel}" if channel else "Telegram",
            description="",
            site_name="Telegram",
            channel=channel,
            is_stub=True,
        )

    async def from_scrape(self, url: str) -> Optional[ResolvedMetadata]:
        channel, message_id = extract_telegram_post(url)

        async def load() -> Optional[ResolvedMetadata]:
            html = await fetch_html(
                self.http, url, settings.bot_user_agent, settings.scrape_timeout_seconds
            )
            metadata = metadata_from_html(html, url)
            if not metadata.title and not metadata.description:
                return None

            # Telegram has no embeddable player; video only shows up as meta tags
            metadata.embed_url = None
            metadata.has_video_media = False
            metadata.channel = channel
            metadata.author = metadata.title if message_id else channel
            metadata.site_name = metadata.site_name or "Telegram"
            return metadata

        return await self.cached(f"telegram:scrape:{url}", load)
