import ipaddress
import logging
import re
import socket
from typing import Optional, Union
from urllib.parse import SplitResult

from preview_api.common.errors import BlockedDomainError, InvalidURLError
from preview_api.utils.url_utils import parse_http_url

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# Hostnames that are, or start with, one of these never get fetched (SSRF guard)
BLOCKED_HOST_PREFIXES = [
    "localhost",
    "127.",
    "127.0.0.1",
    "0.0.0.0",
    "::1",
    "10.",
    "192.168.",
    "169.254.",
] + [f"172.{octet}." for octet in range(16, 32)]

IMAGE_EXTENSIONS = (
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".webp",
    ".bmp",
    ".svg",
    ".avif",
    ".ico",
    ".tif",
    ".tiff",
    ".heic",
)

IMAGE_CDN_PATTERNS = [
    re.compile(r"^i\.imgur\.com$"),
    re.compile(r"^pbs\.twimg\.com$"),
    re.compile(r"^images\.unsplash\.com$"),
    re.compile(r"^i\.redd\.it$"),
    re.compile(r"^i\.ytimg\.com$"),
    re.compile(r"(^|\.)googleusercontent\.com$"),
    re.compile(r"^(media|cdn)\.discordapp\.(net|com)$"),
]


def parse_url(raw_url: str) -> SplitResult:
    parsed = parse_http_url(raw_url)
    if parsed is None:
        raise InvalidURLError()
    return parsed


def _as_ip_address(hostname: str) -> Optional[IPAddress]:
    try:
        address = ipaddress.ip_address(hostname)
    except ValueError:
        # shorthand IPv4 forms the resolver also accepts: "0", "127.1", "2130706433", "0x7f.1"
        try:
            address = ipaddress.IPv4Address(socket.inet_aton(hostname))
        except (OSError, ValueError):
            return None
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        return address.ipv4_mapped
    return address


def is_non_public_ip(address: IPAddress) -> bool:
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
        or address.is_multicast
    )


def is_blocked_host(hostname: str) -> bool:
    hostname = (hostname or "").lower().strip("[]").rstrip(".")
    if any(
        hostname == blocked or hostname.startswith(blocked)
        for blocked in BLOCKED_HOST_PREFIXES
    ):
        return True
    address = _as_ip_address(hostname)
    return address is not None and is_non_public_ip(address)


def ensure_allowed(parsed: SplitResult) -> None:
    if is_blocked_host(parsed.hostname):
        logger.warning(f"Rejected preview request for blocked host {parsed.hostname}")
        raise BlockedDomainError()


def is_image_url(parsed: SplitResult) -> bool:
    if parsed.path.lower().endswith(IMAGE_EXTENSIONS):
        return True
    hostname = parsed.hostname.lower()
    return any(pattern.search(hostname) for pattern in IMAGE_CDN_PATTERNS)
