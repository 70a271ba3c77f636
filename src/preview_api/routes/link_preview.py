import logging

from fastapi import APIRouter, Depends, Request

from preview_api.models.link_preview_data import LinkPreview
from preview_api.models.link_preview_request import (
    FetchLinkPreviewRequest,
    FetchLinkPreviewsForTextRequest,
    LinkPreviewsForTextResponse,
)
from preview_api.services.client_ip_service import detect_client_ip
from preview_api.services.link_preview_service import (
    LinkPreviewService,
    get_link_preview_dependency,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["link-preview"],
)


@router.post(
    "/fetch-link-preview",
    response_model=LinkPreview,
    response_model_by_alias=True,
    operation_id="fetch_link_preview",
)
async def fetch_link_preview(
    request: Request,
    body: FetchLinkPreviewRequest,
    service: LinkPreviewService = Depends(get_link_preview_dependency),
):
    client_ip = detect_client_ip(request)
    return await service.fetch_link_preview(body.url, client_ip)


@router.post(
    "/link-previews",
    response_model=LinkPreviewsForTextResponse,
    response_model_by_alias=True,
    operation_id="fetch_link_previews_for_text",
)
async def fetch_link_previews_for_text(
    request: Request,
    body: FetchLinkPreviewsForTextRequest,
    service: LinkPreviewService = Depends(get_link_preview_dependency),
):
    client_ip = detect_client_ip(request)
    results = await service.fetch_link_previews_for_text(body.text, client_ip)
    logger.info(f"Resolved {len(results)} link previews for post {body.post_id}")
    return LinkPreviewsForTextResponse(results=results)
