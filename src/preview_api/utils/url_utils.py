import ipaddress
import re
from typing import List, Optional
from urllib.parse import SplitResult, urlsplit

URL_REGEX = re.compile(r"https?://[^\s<>\"']+", re.IGNORECASE)

# punctuation that usually ends a sentence rather than a URL
_TRAILING_PUNCTUATION = ".,;:!?)]}"

_HOST_LABEL = re.compile(r"^(?!-)[a-z0-9_-]{1,63}(?<!-)$", re.IGNORECASE)


def is_valid_hostname(hostname: str) -> bool:
    """DNS name (IDNA allowed) or IP literal; rejects spaces, brackets and the like."""
    if not hostname or len(hostname) > 253:
        return False
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    try:
        ascii_host = hostname.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    labels = ascii_host[:-1].split(".") if ascii_host.endswith(".") else ascii_host.split(".")
    return all(_HOST_LABEL.match(label) for label in labels)


def parse_http_url(url: str) -> Optional[SplitResult]:
    """Parse an absolute http(s) URL, or return None."""
    if not isinstance(url, str):
        return None
    try:
        parsed = urlsplit(url.strip())
        hostname = parsed.hostname
        # accessing .port validates it
        parsed.port
    except ValueError:
        return None
    if parsed.scheme.lower() not in ("http", "https") or not is_valid_hostname(hostname):
        return None
    return parsed


def is_valid_url(url: str) -> bool:
    return parse_http_url(url) is not None


def extract_urls(text: str) -> List[str]:
    """Find unique http(s) URLs in free text, in order of appearance."""
    if not text:
        return []

    urls = []
    for match in URL_REGEX.findall(text):
        candidate = match.rstrip(_TRAILING_PUNCTUATION)
        if is_valid_url(candidate) and candidate not in urls:
            urls.append(candidate)
    return urls


def host_matches(hostname: str, domain: str) -> bool:
    """True when hostname is domain or one of its subdomains."""
    hostname = (hostname or "").lower().rstrip(".")
    return hostname == domain or hostname.endswith(f".{domain}")


def path_segments(parsed: SplitResult) -> List[str]:
    return [segment for segment in parsed.path.split("/") if segment]
