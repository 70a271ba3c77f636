import json
import logging
from typing import Any, Dict, Optional

import httpx
from json_repair import repair_json

from preview_api.common.errors import BlockedDomainError
from preview_api.configurations.config import settings
from preview_api.services.safety_filter import is_blocked_host

logger = logging.getLogger(__name__)


async def _reject_blocked_hosts(request: httpx.Request) -> None:
    # runs for every hop, so redirects into the private network are refused too
    if is_blocked_host(request.url.host):
        logger.warning(f"Refusing outbound request to blocked host {request.url.host}")
        raise BlockedDomainError()


def create_http_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=transport,
        follow_redirects=True,
        max_redirects=5,
        timeout=settings.scrape_timeout_seconds,
        event_hooks={"request": [_reject_blocked_hosts]},
    )


class UpstreamHttpClient:
    """Thin wrapper over httpx used by every resolver strategy."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _handle_response(self, response: httpx.Response) -> Optional[httpx.Response]:
        try:
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"HTTP error {e.response.status_code} from {e.request.url.host}: {response.text[:200]}"
            )
        return None

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Raw GET; the caller deals with status codes."""
        return await self.client.get(
            url,
            params=params,
            headers=headers,
            timeout=timeout or settings.scrape_timeout_seconds,
        )

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Optional[Any]:
        response = await self.get(url, params=params, headers=headers, timeout=timeout)
        handled = await self._handle_response(response)
        if handled is None:
            return None
        try:
            return handled.json()
        except ValueError:
            # some oEmbed endpoints emit slightly broken JSON
            logger.info(f"Repairing malformed JSON from {response.request.url.host}")
            return json.loads(repair_json(handled.text))

    async def get_capped_text(
        self,
        url: str,
        *,
        max_bytes: int,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """Streamed GET that stops reading after max_bytes; raises on non-2xx."""
        async with self.client.stream(
            "GET",
            url,
            headers=headers,
            timeout=timeout or settings.scrape_timeout_seconds,
        ) as response:
            response.raise_for_status()
            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) >= max_bytes:
                    logger.info(f"Truncating body of {url} at {max_bytes} bytes")
                    break
            encoding = response.charset_encoding or "utf-8"

        try:
            return bytes(body[:max_bytes]).decode(encoding, errors="replace")
        except LookupError:
            return bytes(body[:max_bytes]).decode("utf-8", errors="replace")

    async def aclose(self) -> None:
        await self.client.aclose()
