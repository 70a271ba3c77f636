from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from preview_api.configurations.config import settings
from preview_api.services.link_preview_service import (
    LinkPreviewService,
    get_link_preview_dependency,
)

router = APIRouter(
    prefix="/rumble",
    tags=["rumble"],
)


@router.get("/oembed", operation_id="get_rumble_oembed")
async def get_rumble_oembed(
    url: Optional[str] = Query(None),
    service: LinkPreviewService = Depends(get_link_preview_dependency),
):
    payload = await service.proxy_rumble_oembed(url)
    return JSONResponse(
        content=payload,
        headers={
            "Cache-Control": f"public, max-age={int(settings.platform_cache_ttl_seconds)}"
        },
    )
