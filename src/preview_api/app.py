import logging
import time
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

from preview_api.common.errors import InvalidURLError, LinkPreviewError
from preview_api.configurations.health_check_config import setup_health_checks
from preview_api.configurations.logging_config import setup_logging
from preview_api.lifespan import lifespan
from preview_api.routes import link_preview, rumble

setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LinkPreviewError)
async def link_preview_error_handler(request: Request, exc: LinkPreviewError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # malformed bodies are reported like any other bad URL
    return JSONResponse({"error": InvalidURLError.message}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse({"error": LinkPreviewError.message}, status_code=500)


app.include_router(link_preview.router)
app.include_router(rumble.router)

setup_health_checks(app)


@app.middleware("http")
async def log_request_middleware(request: Request, call_next: Callable):
    if not request.url.path.startswith(("/posts", "/rumble")):
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} in {process_time:.4f} seconds"
    )
    return response
