from typing import Any, Dict, Optional

import httpx

from preview_api.configurations.config import settings
from preview_api.services.external_clients.http_client import UpstreamHttpClient

RUMBLE_OEMBED_ENDPOINT = "https://rumble.com/api/Media/oembed.json"
RUMBLE_USER_AGENT = "LinkPreviewBot/1.0 (+oembed)"


class RumbleClient:
    def __init__(self, http: UpstreamHttpClient):
        self.http = http

    async def get_oembed_response(self, url: str) -> httpx.Response:
        """Raw oEmbed response, used by the pass-through proxy route."""
        return await self.http.get(
            RUMBLE_OEMBED_ENDPOINT,
            params={"url": url},
            headers={"User-Agent": RUMBLE_USER_AGENT},
            timeout=settings.oembed_timeout_seconds,
        )

    async def get_oembed(self, url: str) -> Optional[Dict[str, Any]]:
        return await self.http.get_json(
            RUMBLE_OEMBED_ENDPOINT,
            params={"url": url},
            headers={"User-Agent": RUMBLE_USER_AGENT},
            timeout=settings.oembed_timeout_seconds,
        )
