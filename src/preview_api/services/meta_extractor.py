"""
Meta tag extraction from raw HTML.

Every field is looked up with BeautifulSoup first. When the parsed tree has
nothing for a field, a tolerant regex scans the raw text as a second pass
(either attribute order, ``name``/``property``/``itemprop``, any quoting), which
picks up tags the parser never sees as elements, e.g. markup inside a script
template.
"""

import html as html_lib
import re
from typing import Dict, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup

VIDEO_META_KEYS = (
    "og:video",
    "og:video:url",
    "og:video:secure_url",
    "og:video:type",
    "twitter:player",
    "twitter:player:stream",
)

_FLAGS = re.IGNORECASE | re.DOTALL


class Page:
    """Parsed document plus the raw text the regex pass runs on."""

    def __init__(self, html: Optional[str]):
        self.html = html or ""
        self.soup = BeautifulSoup(self.html, "html.parser")


PageSource = Union[str, Page]


def as_page(source: Optional[PageSource]) -> Page:
    return source if isinstance(source, Page) else Page(source)


def _squash(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = re.sub(r"\s+", " ", value).strip()
    return value or None


def _clean(value: str) -> Optional[str]:
    value = re.sub(r"<[^>]+>", "", value)
    return _squash(html_lib.unescape(value))


def _first_group(pattern: re.Pattern, html: str) -> Optional[str]:
    match = pattern.search(html) if html else None
    if not match:
        return None
    for group in match.groups():
        if group is not None:
            return _clean(group)
    return None


_QUOTED_VALUE = r"""(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))"""

_META_FALLBACKS: Dict[str, re.Pattern] = {}


def _meta_fallback(key: str) -> re.Pattern:
    if key not in _META_FALLBACKS:
        escaped = re.escape(key)
        key_attr = (
            rf"""\b(?:property|name|itemprop)\s*=\s*["']?{escaped}(?=["'\s/>])["']?"""
        )
        _META_FALLBACKS[key] = re.compile(
            rf"""<meta\b[^>]*?{key_attr}[^>]*?\bcontent\s*=\s*{_QUOTED_VALUE}"""
            rf"""|<meta\b[^>]*?\bcontent\s*=\s*{_QUOTED_VALUE}[^>]*?{key_attr}""",
            _FLAGS,
        )
    return _META_FALLBACKS[key]


TITLE_FALLBACK = re.compile(r"<title[^>]*>(.*?)</title>", _FLAGS)

FAVICON_FALLBACK = re.compile(
    r"""<link\b[^>]*?\brel\s*=\s*["']?[^"'>]*icon[^"'>]*["']?[^>]*?\bhref\s*=\s*"""
    + _QUOTED_VALUE
    + r"""|<link\b[^>]*?\bhref\s*=\s*"""
    + _QUOTED_VALUE
    + r"""[^>]*?\brel\s*=\s*["']?[^"'>]*icon""",
    _FLAGS,
)

EMBED_URL_KEY = re.compile(r"^embed_?url$", re.IGNORECASE)

EMBED_URL_FALLBACK = re.compile(r"""["']embed_?url["']\s*:\s*["']([^"']+)["']""", _FLAGS)


def _get_meta_tag_content(soup: BeautifulSoup, key) -> Optional[str]:
    tag = (
        soup.find("meta", property=key)
        or soup.find("meta", attrs={"name": key})
        or soup.find("meta", attrs={"itemprop": key})
    )
    return _squash(tag.get("content")) if tag else None


def extract_meta_content(source: PageSource, key: str) -> Optional[str]:
    page = as_page(source)
    return _get_meta_tag_content(page.soup, key) or _first_group(
        _meta_fallback(key), page.html
    )


def extract_title(source: PageSource) -> Optional[str]:
    page = as_page(source)
    tag = page.soup.find("title")
    title = _squash(tag.get_text()) if tag else None
    return title or _first_group(TITLE_FALLBACK, page.html)


def extract_og_title(source: PageSource) -> Optional[str]:
    return extract_meta_content(source, "og:title")


def extract_og_description(source: PageSource) -> Optional[str]:
    return extract_meta_content(source, "og:description")


def extract_description(source: PageSource) -> Optional[str]:
    return extract_meta_content(source, "description")


def extract_site_name(source: PageSource) -> Optional[str]:
    return extract_meta_content(source, "og:site_name")


def extract_og_image(source: PageSource, base_url: str) -> Optional[str]:
    page = as_page(source)
    image = extract_meta_content(page, "og:image") or extract_meta_content(
        page, "twitter:image"
    )
    return urljoin(base_url, image) if image else None


def _rel_tokens(link) -> list:
    rel = link.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [token.lower() for token in rel]


def extract_favicon(source: PageSource, base_url: str) -> Optional[str]:
    page = as_page(source)
    favicon = None
    for link in page.soup.find_all("link", href=True):
        if "icon" in _rel_tokens(link):
            favicon = _squash(link["href"])
            break
    favicon = favicon or _first_group(FAVICON_FALLBACK, page.html)
    return urljoin(base_url, favicon) if favicon else None


def extract_video_tags(source: PageSource) -> Dict[str, str]:
    page = as_page(source)
    tags = {}
    for key in VIDEO_META_KEYS:
        value = extract_meta_content(page, key)
        if value:
            tags[key] = value
    return tags


def _absolute_embed_src(src: str) -> Optional[str]:
    if src.startswith("//"):
        return f"https:{src}"
    if src.lower().startswith(("http://", "https://")):
        return src
    return None


def extract_iframe_src(source: PageSource, host_fragment: str) -> Optional[str]:
    """First iframe src pointing at host_fragment (e.g. 'rumble.com/embed/')."""
    page = as_page(source)
    for iframe in page.soup.find_all("iframe", src=True):
        src = iframe["src"].strip()
        if host_fragment in src and _absolute_embed_src(src):
            return _absolute_embed_src(src)

    escaped = re.escape(host_fragment)
    match = re.search(
        rf"""<iframe\b[^>]*?\bsrc\s*=\s*["']((?:https?:)?//[^"']*{escaped}[^"']*)["']""",
        page.html,
        _FLAGS,
    )
    if not match:
        return None
    return _absolute_embed_src(html_lib.unescape(match.group(1)))


def extract_embed_url(source: PageSource) -> Optional[str]:
    """embed_url / embedUrl from a meta tag or inline JSON (JSON-LD, player config)."""
    page = as_page(source)
    value = _get_meta_tag_content(page.soup, EMBED_URL_KEY) or _first_group(
        EMBED_URL_FALLBACK, page.html
    )
    return value.replace("\\/", "/") if value else None
