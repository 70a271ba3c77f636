from typing import List, Tuple

from preview_api.models.link_preview_data import ResolvedMetadata
from preview_api.services.og_service import get_og_preview
from preview_api.services.resolvers.base_resolver import PlatformResolver, Strategy


class GenericResolver(PlatformResolver):
    """Plain page download + meta extraction. Nothing to fall back to after this."""

    platform = None

    def strategies(self) -> List[Tuple[str, Strategy]]:
        return []

    async def resolve(self, url: str) -> ResolvedMetadata:
        # GenericFetchError propagates to the caller as a 500
        return await get_og_preview(self.http, url)
