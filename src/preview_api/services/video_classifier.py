from preview_api.models.link_preview_data import ResolvedMetadata
from preview_api.utils.url_utils import host_matches, parse_http_url

VIDEO_PLATFORM_DOMAINS = (
    "youtube.com",
    "youtu.be",
    "youtube-nocookie.com",
    "vimeo.com",
    "dailymotion.com",
    "dai.ly",
    "twitch.tv",
    "rumble.com",
    "odysee.com",
    "bitchute.com",
    "streamable.com",
)

VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".m4v", ".ogv", ".mkv", ".avi", ".m3u8")


def is_video_domain(hostname: str) -> bool:
    return any(host_matches(hostname, domain) for domain in VIDEO_PLATFORM_DOMAINS)


def is_video_url(url: str) -> bool:
    parsed = parse_http_url(url)
    if not parsed:
        return False
    return is_video_domain(parsed.hostname) or parsed.path.lower().endswith(
        VIDEO_EXTENSIONS
    )


def is_video(url: str, metadata: ResolvedMetadata) -> bool:
    """Any one signal is enough: host, file extension, page tags or platform flag."""
    return is_video_url(url) or bool(metadata.video_tags) or metadata.has_video_media
