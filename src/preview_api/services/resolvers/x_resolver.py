import logging
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup

from preview_api.configurations.config import settings
from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.services.cache_service import PreviewCache
from preview_api.services.external_clients.http_client import UpstreamHttpClient
from preview_api.services.external_clients.models.upstream_models import (
    OEmbedResponse,
    XTweetResponse,
)
from preview_api.services.external_clients.x_client import XClient
from preview_api.services.og_service import fetch_html, metadata_from_html
from preview_api.services.resolvers.base_resolver import PlatformResolver, Strategy
from preview_api.services.video_classifier import is_video_url
from preview_api.utils.platform_ids import extract_tweet_id, username_from_x_url

logger = logging.getLogger(__name__)

VIDEO_MEDIA_TYPES = ("video", "animated_gif")

# what x.com serves to clients that don't run its JavaScript
_SHELL_TITLES = ("x", "twitter")


def _parse_oembed_html(html: str) -> Tuple[Optional[str], List[str], Optional[str]]:
    """Tweet text, linked URLs and the date line from an oEmbed blockquote."""
    soup = BeautifulSoup(html, "html.parser")
    blockquote = soup.find("blockquote")
    if not blockquote:
        return None, [], None

    paragraph = blockquote.find("p")
    text = paragraph.get_text(" ", strip=True) if paragraph else None
    links = [a.get("href") for a in blockquote.find_all("a") if a.get("href")]

    anchors = blockquote.find_all("a")
    date_text = anchors[-1].get_text(strip=True) if anchors else None
    return text, links, date_text


def _username_from_author_url(author_url: Optional[str]) -> Optional[str]:
    return username_from_x_url(author_url) if author_url else None


class XResolver(PlatformResolver):
    platform = Platform.X

    def __init__(
        self, http: UpstreamHttpClient, platform_cache: PreviewCache, x_client: XClient
    ):
        super().__init__(http, platform_cache)
        self.x_client = x_client

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return [
            ("api-v2", self.from_api),
            ("oembed", self.from_oembed),
            ("scrape", self.from_scrape),
        ]

    def stub(self, url: str) -> ResolvedMetadata:
        _, username = extract_tweet_id(url)
        username = username or username_from_x_url(url)
        return ResolvedMetadata(
            title=f"Tweet by @{username}" if username else "Post on X",
            description="",
            site_name="X",
            author=username,
            is_stub=True,
        )

    async def from_api(self, url: str) -> Optional[ResolvedMetadata]:
        if not self.x_client.api_enabled:
            logger.debug("X bearer token not configured, skipping API v2")
            return None

        tweet_id, _ = extract_tweet_id(url)
        if not tweet_id:
            return None

        async def load() -> Optional[ResolvedMetadata]:
            response = await self.x_client.get_tweet(tweet_id)
            return self._from_tweet_response(response) if response else None

        return await self.cached(f"x:api:{tweet_id}", load)

    @staticmethod
    def _from_tweet_response(response: XTweetResponse) -> ResolvedMetadata:
        tweet = response.data
        author = next(
            (user for user in response.users if user.id == tweet.author_id),
            response.users[0] if response.users else None,
        )

        image_url = None
        for media in response.media:
            image_url = media.url or media.preview_image_url
            if image_url:
                break
        if not image_url and author:
            image_url = author.profile_image_url

        if author and author.name and author.username:
            title = f"{author.name} (@{author.username})"
        elif author and author.username:
            title = f"Tweet by @{author.username}"
        else:
            title = "Post on X"

        metrics = tweet.public_metrics
        return ResolvedMetadata(
            title=title,
            description=tweet.text,
            image_url=image_url,
            site_name="X",
            has_video_media=any(m.type in VIDEO_MEDIA_TYPES for m in response.media),
            author=author.username if author else None,
            like_count=metrics.like_count if metrics else None,
            view_count=metrics.impression_count if metrics else None,
            published_at=tweet.created_at,
        )

    async def from_oembed(self, url: str) -> Optional[ResolvedMetadata]:
        async def load() -> Optional[ResolvedMetadata]:
            oembed = await self.x_client.get_oembed(url)
            return self._from_oembed(oembed) if oembed else None

        return await self.cached(f"x:oembed:{url}", load)

    @staticmethod
    def _from_oembed(oembed: OEmbedResponse) -> Optional[ResolvedMetadata]:
        if not oembed.html:
            return None

        text, links, date_text = _parse_oembed_html(oembed.html)
        username = _username_from_author_url(oembed.author_url)
        if username:
            title = f"Tweet by @{username}"
        elif oembed.author_name:
            title = f"Tweet by {oembed.author_name}"
        else:
            title = "Post on X"

        return ResolvedMetadata(
            title=title,
            description=text or "",
            site_name=oembed.provider_name or "X",
            has_video_media=any(is_video_url(link) for link in links),
            author=username or oembed.author_name,
            published_at=date_text,
        )

    async def from_scrape(self, url: str) -> Optional[ResolvedMetadata]:
        async def load() -> Optional[ResolvedMetadata]:
            html = await fetch_html(
                self.http,
                url,
                settings.browser_user_agent,
                settings.scrape_timeout_seconds,
            )
            metadata = metadata_from_html(html, url)
            title = (metadata.title or "").strip().lower()
            if not metadata.description and (not title or title in _SHELL_TITLES):
                return None
            metadata.has_video_media = bool(metadata.video_tags)
            return metadata

        return await self.cached(f"x:scrape:{url}", load)
