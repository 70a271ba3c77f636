from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from preview_api.models.link_preview_data import LinkPreview


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FetchLinkPreviewRequest(CamelModel):
    url: Optional[str] = None
    # accepted for caller bookkeeping only
    post_id: Optional[str] = None


class FetchLinkPreviewsForTextRequest(CamelModel):
    text: Optional[str] = None
    post_id: Optional[str] = None


class LinkPreviewResult(CamelModel):
    url: str
    status: int
    preview: Optional[LinkPreview] = None
    error: Optional[str] = None


class LinkPreviewsForTextResponse(CamelModel):
    results: List[LinkPreviewResult]
