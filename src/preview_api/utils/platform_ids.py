import re
from typing import Optional, Tuple
from urllib.parse import parse_qs, unquote

from preview_api.utils.url_utils import host_matches, parse_http_url, path_segments

_YOUTUBE_ID = re.compile(r"^[A-Za-z0-9_-]{6,}$")
_TWEET_PATH = re.compile(
    r"^/(?:i/web|i|([A-Za-z0-9_]{1,15}))/status(?:es)?/(\d+)", re.IGNORECASE
)


def extract_youtube_video_id(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None

    segments = path_segments(parsed)
    candidate = None

    if host_matches(parsed.hostname, "youtu.be"):
        candidate = segments[0] if segments else None
    elif host_matches(parsed.hostname, "youtube.com") or host_matches(
        parsed.hostname, "youtube-nocookie.com"
    ):
        # watch?v=, and channel-qualified URLs that still carry v=
        query_id = parse_qs(parsed.query).get("v")
        if query_id:
            candidate = query_id[0]
        elif len(segments) >= 2 and segments[0] in ("embed", "shorts", "live", "v"):
            candidate = segments[1]

    if candidate and _YOUTUBE_ID.match(candidate):
        return candidate
    return None


def extract_tweet_id(url: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (tweet_id, username); username is None for /i/status/ links."""
    parsed = parse_http_url(url)
    if not parsed:
        return None, None

    match = _TWEET_PATH.match(parsed.path)
    if not match:
        return None, username_from_x_url(url)
    return match.group(2), match.group(1)


def username_from_x_url(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None
    segments = path_segments(parsed)
    if segments and segments[0].lower() not in ("i", "home", "search", "intent"):
        return segments[0]
    return None


def extract_rumble_video_id(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None

    embed_match = re.search(r"/embed/([^/]+)", parsed.path)
    if embed_match:
        return embed_match.group(1)

    video_match = re.match(r"^/v([^-/.]+)", parsed.path)
    return video_match.group(1) if video_match else None


def extract_odysee_video_id(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None

    path = unquote(parsed.path)
    embed_match = re.search(r"/\$/embed/([^/?#]+)", path)
    if embed_match:
        return embed_match.group(1)

    video_match = re.search(r"/@[^/]+/([^:/]+)", path)
    if video_match:
        return video_match.group(1)

    alt_match = re.match(r"^/([^@$:/][^:/]*)(?::|$)", path)
    return alt_match.group(1) if alt_match else None


def extract_odysee_channel(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None
    match = re.search(r"/(@[^/:#]+)", unquote(parsed.path))
    return match.group(1) if match else None


def extract_telegram_post(url: str) -> Tuple[Optional[str], Optional[str]]:
    """Return (channel, message_id) for t.me/<channel>/<id> and t.me/s/<channel>/<id>."""
    parsed = parse_http_url(url)
    if not parsed:
        return None, None

    segments = path_segments(parsed)
    if segments and segments[0] == "s":
        segments = segments[1:]
    if not segments:
        return None, None

    channel = segments[0]
    message_id = segments[1] if len(segments) > 1 and segments[1].isdigit() else None
    return channel, message_id


def extract_vimeo_video_id(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None
    for segment in path_segments(parsed):
        if segment.isdigit():
            return segment
    return None


def extract_dailymotion_video_id(url: str) -> Optional[str]:
    parsed = parse_http_url(url)
    if not parsed:
        return None
    segments = path_segments(parsed)
    if not segments:
        return None
    if host_matches(parsed.hostname, "dai.ly"):
        return segments[0]
    if "video" in segments:
        index = segments.index("video")
        if index + 1 < len(segments):
            # /video/x8abc12_some-title
            return segments[index + 1].split("_")[0]
    return None
