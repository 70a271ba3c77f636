from fastapi import FastAPI

from preview_api.configurations.config import settings
from preview_api.services.health_check.cache_health_check import (
    CacheBackendHealthCheck,
)
from preview_api.services.health_check.health_check_factory import HealthCheckFactory
from preview_api.services.health_check.health_check_route import (
    create_health_check_route,
)
from preview_api.services.link_preview_service import get_link_preview_service

_health_checks = HealthCheckFactory()

_health_checks.add(
    CacheBackendHealthCheck(
        alias=f"preview-cache-{settings.cache_backend}",
        backend_provider=lambda: get_link_preview_service().preview_cache.backend,
        tags=["cache", settings.cache_backend],
    )
)


def setup_health_checks(app: FastAPI) -> None:
    app.add_api_route(
        "/health", endpoint=create_health_check_route(factory=_health_checks)
    )
