import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from preview_api.configurations.config import settings
from preview_api.services.link_preview_service import get_link_preview_service
from preview_api.services.redis_service import get_redis_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(local_app: FastAPI):
    service = get_link_preview_service()
    logger.info(
        f"Link preview service ready (cache backend: {settings.cache_backend})"
    )

    yield

    logger.info("Shutting down application")

    await service.aclose()

    if settings.cache_backend == "redis":
        try:
            await get_redis_service().aclose()
            logger.info("Redis connection closed successfully")
        except Exception as e:
            logger.error(f"Error closing Redis connection: {e}")

    logger.info("Application shutdown complete")
