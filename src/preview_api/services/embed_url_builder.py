from typing import Optional
from urllib.parse import urlencode, urlsplit

from preview_api.models.link_preview_data import Platform, ResolvedMetadata
from preview_api.utils.platform_ids import (
    extract_dailymotion_video_id,
    extract_odysee_video_id,
    extract_tweet_id,
    extract_vimeo_video_id,
    extract_youtube_video_id,
)
from preview_api.utils.url_utils import host_matches, parse_http_url, path_segments


class EmbedUrlBuilder:
    """
    Builds iframe URLs for players that can be embedded.

    YouTube, Vimeo and Dailymotion get an ``origin`` parameter and Twitch a
    ``parent`` parameter, both taken from the public origin of the deployment.
    """

    def __init__(self, public_origin: str):
        self.public_origin = public_origin.rstrip("/")
        self.parent_host = urlsplit(self.public_origin).hostname or "localhost"

    def build(
        self, url: str, platform: Optional[Platform], metadata: ResolvedMetadata
    ) -> Optional[str]:
        if platform == Platform.YOUTUBE:
            return self.youtube(url)
        if platform == Platform.X:
            return self.x(url)
        if platform == Platform.RUMBLE:
            # Rumble embed paths are not derivable from the watch page URL
            return metadata.embed_url
        if platform == Platform.ODYSEE:
            return metadata.embed_url or self.odysee(url)
        if platform == Platform.TELEGRAM:
            return None

        parsed = parse_http_url(url)
        if not parsed:
            return None
        if host_matches(parsed.hostname, "vimeo.com"):
            return self.vimeo(url)
        if host_matches(parsed.hostname, "dailymotion.com") or host_matches(
            parsed.hostname, "dai.ly"
        ):
            return self.dailymotion(url)
        if host_matches(parsed.hostname, "twitch.tv"):
            return self.twitch(url)
        return None

    def youtube(self, url: str) -> Optional[str]:
        video_id = extract_youtube_video_id(url)
        if not video_id:
            return None
        params = {
            "rel": "0",
            "modestbranding": "1",
            "enablejsapi": "1",
            "origin": self.public_origin,
        }
        return f"https://www.youtube.com/embed/{video_id}?{urlencode(params)}"

    def vimeo(self, url: str) -> Optional[str]:
        video_id = extract_vimeo_video_id(url)
        if not video_id:
            return None
        return f"https://player.vimeo.com/video/{video_id}?{urlencode({'origin': self.public_origin})}"

    def dailymotion(self, url: str) -> Optional[str]:
        video_id = extract_dailymotion_video_id(url)
        if not video_id:
            return None
        return f"https://www.dailymotion.com/embed/video/{video_id}?{urlencode({'origin': self.public_origin})}"

    def twitch(self, url: str) -> Optional[str]:
        parsed = parse_http_url(url)
        segments = path_segments(parsed) if parsed else []
        if not segments:
            return None

        if host_matches(parsed.hostname, "clips.twitch.tv"):
            params = {"clip": segments[0], "parent": self.parent_host}
            return f"https://clips.twitch.tv/embed?{urlencode(params)}"
        if len(segments) >= 3 and segments[1] == "clip":
            params = {"clip": segments[2], "parent": self.parent_host}
            return f"https://clips.twitch.tv/embed?{urlencode(params)}"
        if segments[0] == "videos" and len(segments) >= 2:
            params = {"video": segments[1], "parent": self.parent_host}
        else:
            params = {"channel": segments[0], "parent": self.parent_host}
        return f"https://player.twitch.tv/?{urlencode(params)}"

    def x(self, url: str) -> Optional[str]:
        tweet_id, _ = extract_tweet_id(url)
        if not tweet_id:
            return None
        return f"https://platform.twitter.com/embed/Tweet.html?id={tweet_id}"

    def odysee(self, url: str) -> Optional[str]:
        video_id = extract_odysee_video_id(url)
        if not video_id:
            return None
        return f"https://odysee.com/embed/{video_id}"
