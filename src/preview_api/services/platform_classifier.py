from typing import List, Optional, Tuple

from preview_api.models.link_preview_data import Platform
from preview_api.utils.url_utils import host_matches

# Checked in order, first match wins
PLATFORM_HOSTS: List[Tuple[Tuple[str, ...], Platform]] = [
    (("youtube.com", "youtu.be", "youtube-nocookie.com"), Platform.YOUTUBE),
    (("x.com", "twitter.com"), Platform.X),
    (("rumble.com",), Platform.RUMBLE),
    (("odysee.com",), Platform.ODYSEE),
    (("t.me", "telegram.me"), Platform.TELEGRAM),
]


def classify_platform(hostname: str) -> Optional[Platform]:
    """Pick the platform for a hostname; None means the generic extractor."""
    for domains, platform in PLATFORM_HOSTS:
        if any(host_matches(hostname, domain) for domain in domains):
            return platform
    return None
