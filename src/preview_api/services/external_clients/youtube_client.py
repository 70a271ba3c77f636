import logging
from typing import Optional

from preview_api.configurations.config import settings
from preview_api.services.external_clients.http_client import UpstreamHttpClient
from preview_api.services.external_clients.models.upstream_models import (
    YouTubeVideo,
    YouTubeVideoListResponse,
)

logger = logging.getLogger(__name__)

YOUTUBE_VIDEOS_ENDPOINT = "https://www.googleapis.com/youtube/v3/videos"


class YouTubeDataClient:
    def __init__(self, http: UpstreamHttpClient, api_key: Optional[str]):
        self.http = http
        self.api_key = api_key

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def get_video(self, video_id: str) -> Optional[YouTubeVideo]:
        payload = await self.http.get_json(
            YOUTUBE_VIDEOS_ENDPOINT,
            params={
                "part": "snippet,statistics",
                "id": video_id,
                "key": self.api_key,
            },
            timeout=settings.api_timeout_seconds,
        )
        if payload is None:
            return None

        response = YouTubeVideoListResponse.model_validate(payload)
        if not response.items:
            logger.info(f"YouTube API returned no items for video {video_id}")
            return None
        return response.items[0]
