import logging
from typing import Optional

from preview_api.configurations.config import settings
from preview_api.services.external_clients.http_client import UpstreamHttpClient
from preview_api.services.external_clients.models.upstream_models import (
    OEmbedResponse,
    XTweetResponse,
)

logger = logging.getLogger(__name__)

X_TWEETS_ENDPOINT = "https://api.twitter.com/2/tweets/{tweet_id}"
X_OEMBED_ENDPOINT = "https://publish.twitter.com/oembed"


class XClient:
    def __init__(self, http: UpstreamHttpClient, bearer_token: Optional[str]):
        self.http = http
        self.bearer_token = bearer_token

    @property
    def api_enabled(self) -> bool:
        return bool(self.bearer_token)

    async def get_tweet(self, tweet_id: str) -> Optional[XTweetResponse]:
        payload = await self.http.get_json(
            X_TWEETS_ENDPOINT.format(tweet_id=tweet_id),
            params={
                "expansions": "author_id,attachments.media_keys",
                "tweet.fields": "created_at,public_metrics,attachments",
                "user.fields": "name,username,profile_image_url",
                "media.fields": "type,url,preview_image_url",
            },
            headers={"Authorization": f"Bearer {self.bearer_token}"},
            timeout=settings.api_timeout_seconds,
        )
        if not payload or "data" not in payload:
            if payload and payload.get("errors"):
                logger.info(f"X API returned errors for tweet {tweet_id}: {payload['errors']}")
            return None
        return XTweetResponse.model_validate(payload)

    async def get_oembed(self, url: str) -> Optional[OEmbedResponse]:
        payload = await self.http.get_json(
            X_OEMBED_ENDPOINT,
            params={"url": url, "omit_script": "true", "dnt": "true"},
            timeout=settings.oembed_timeout_seconds,
        )
        if not payload:
            return None
        return OEmbedResponse.model_validate(payload)
