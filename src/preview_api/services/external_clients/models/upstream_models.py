from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class YouTubeThumbnail(BaseModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class YouTubeSnippet(BaseModel):
    title: str = ""
    description: str = ""
    channel_title: Optional[str] = Field(None, alias="channelTitle")
    published_at: Optional[str] = Field(None, alias="publishedAt")
    thumbnails: Dict[str, YouTubeThumbnail] = Field(default_factory=dict)

    def best_thumbnail(self) -> Optional[str]:
        for size in ("maxres", "standard", "high", "medium", "default"):
            if size in self.thumbnails:
                return self.thumbnails[size].url
        return None


class YouTubeStatistics(BaseModel):
    view_count: Optional[int] = Field(None, alias="viewCount")
    like_count: Optional[int] = Field(None, alias="likeCount")


class YouTubeVideo(BaseModel):
    id: str
    snippet: YouTubeSnippet
    statistics: YouTubeStatistics = Field(default_factory=YouTubeStatistics)


class YouTubeVideoListResponse(BaseModel):
    items: List[YouTubeVideo] = Field(default_factory=list)


class XPublicMetrics(BaseModel):
    like_count: Optional[int] = None
    impression_count: Optional[int] = None


class XTweet(BaseModel):
    id: str
    text: str = ""
    author_id: Optional[str] = None
    created_at: Optional[str] = None
    public_metrics: Optional[XPublicMetrics] = None


class XUser(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    profile_image_url: Optional[str] = None


class XMedia(BaseModel):
    media_key: Optional[str] = None
    type: str
    url: Optional[str] = None
    preview_image_url: Optional[str] = None


class XTweetResponse(BaseModel):
    data: XTweet
    users: List[XUser] = Field(default_factory=list)
    media: List[XMedia] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def flatten_includes(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        includes = data.get("includes") or {}
        return {
            **data,
            "users": includes.get("users", []),
            "media": includes.get("media", []),
        }


class OEmbedResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None
    title: Optional[str] = None
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    provider_name: Optional[str] = None
    thumbnail_url: Optional[str] = None
    html: Optional[str] = None
