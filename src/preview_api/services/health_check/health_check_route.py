from collections.abc import Awaitable, Callable

from fastapi.responses import JSONResponse
from fastapi_healthcheck.enum import HealthCheckStatusEnum

from preview_api.services.health_check.health_check_factory import HealthCheckFactory


def create_health_check_route(
    factory: HealthCheckFactory,
) -> Callable[[], Awaitable[JSONResponse]]:
    """
    Build the /health endpoint for a factory.

    Responds 200 when every check is healthy and 503 otherwise.
    """

    async def endpoint() -> JSONResponse:
        result = await factory.check()
        status_code = 200 if result["status"] == HealthCheckStatusEnum.HEALTHY.value else 503
        return JSONResponse(content=result, status_code=status_code)

    return endpoint
