from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Platform(str, Enum):
    YOUTUBE = "youtube"
    X = "x"
    RUMBLE = "rumble"
    ODYSEE = "odysee"
    TELEGRAM = "telegram"


class ResolvedMetadata(BaseModel):
    """What a resolver strategy managed to learn about a URL."""

    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    favicon_url: Optional[str] = None
    site_name: Optional[str] = None
    embed_url: Optional[str] = None
    # og:video*, twitter:player* tags found on the page
    video_tags: Dict[str, str] = Field(default_factory=dict)
    # platform API said this is video (e.g. X media type)
    has_video_media: bool = False
    author: Optional[str] = None
    channel: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None
    published_at: Optional[str] = None
    is_stub: bool = False


class LinkPreview(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    url: str
    title: Optional[str] = ""
    description: Optional[str] = ""
    image_url: Optional[str] = None
    domain: str
    favicon_url: Optional[str] = None
    is_video: bool = False
    is_image: bool = False
    embed_url: Optional[str] = None
    platform: Optional[Platform] = None
    author: Optional[str] = None
    site_name: Optional[str] = None
    channel: Optional[str] = None
    view_count: Optional[int] = None
    like_count: Optional[int] = None
    published_at: Optional[str] = None
    cached_at: str
