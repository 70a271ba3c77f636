import logging

import httpx

from preview_api.common.errors import GenericFetchError
from preview_api.configurations.config import settings
from preview_api.models.link_preview_data import ResolvedMetadata
from preview_api.services import meta_extractor
from preview_api.services.external_clients.http_client import UpstreamHttpClient


def metadata_from_html(html: meta_extractor.PageSource, url: str) -> ResolvedMetadata:
    """Open Graph / Twitter card / plain meta fields of a page."""
    page = meta_extractor.as_page(html)
    return ResolvedMetadata(
        title=meta_extractor.extract_og_title(page) or meta_extractor.extract_title(page),
        description=meta_extractor.extract_og_description(page)
        or meta_extractor.extract_description(page),
        image_url=meta_extractor.extract_og_image(page, url),
        favicon_url=meta_extractor.extract_favicon(page, url),
        site_name=meta_extractor.extract_site_name(page),
        video_tags=meta_extractor.extract_video_tags(page),
    )


async def fetch_html(
    http: UpstreamHttpClient, url: str, user_agent: str, timeout: float
) -> str:
    """
    Download a page, keeping at most settings.max_html_bytes of it. Raises on
    network errors and non-2xx statuses.
    """
    return await http.get_capped_text(
        url,
        headers={
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.8",
        },
        timeout=timeout,
        max_bytes=settings.max_html_bytes,
    )


async def get_og_preview(http: UpstreamHttpClient, url: str) -> ResolvedMetadata:
    """
    Fetches a page with the bot user agent and extracts its preview metadata.
    This is the last resort for every URL, so a failed download is an error.
    """
    try:
        logging.info(f"Fetching OG preview for {url}")
        html_content = await fetch_html(
            http, url, settings.bot_user_agent, settings.scrape_timeout_seconds
        )
    except httpx.HTTPStatusError as e:
        logging.warning(f"Generic fetch of {url} returned {e.response.status_code}")
        raise GenericFetchError() from e
    except httpx.HTTPError as e:
        logging.warning(f"Generic fetch of {url} failed: {e!r}")
        raise GenericFetchError() from e

    return metadata_from_html(html_content, url)
