import logging
from typing import Callable, List, Optional

from fastapi_healthcheck.enum import HealthCheckStatusEnum

from preview_api.services.cache_service import CacheBackend
from preview_api.services.health_check.health_check_interface import (
    HealthCheckProtocol,
)

logger = logging.getLogger(__name__)


class CacheBackendHealthCheck(HealthCheckProtocol):
    """Pings the preview cache backend. Always healthy for the in-memory backend."""

    def __init__(
        self,
        alias: str,
        backend_provider: Callable[[], CacheBackend],
        tags: Optional[List[str]] = None,
    ) -> None:
        self.alias = alias
        self.tags = tags or []
        self._backend_provider = backend_provider

    async def check_health(self) -> HealthCheckStatusEnum:
        try:
            if await self._backend_provider().ping():
                return HealthCheckStatusEnum.HEALTHY
            return HealthCheckStatusEnum.UNHEALTHY
        except Exception as e:
            logger.error(f"Cache health check failed: {e}")
            return HealthCheckStatusEnum.UNHEALTHY
