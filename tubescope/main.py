import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tubescope.client import get_client
from tubescope.config import get_settings
from tubescope.exceptions import (
    AuthenticationError,
    ConfigurationError,
    IntegrationError,
    InvalidInputError,
    NotFoundError,
    RateLimitError,
)
from tubescope.routers.channels import router as channels_router
from tubescope.routers.egress import router as egress_router
from tubescope.routers.videos import router as videos_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_client.cache_info().currsize:
        await get_client().aclose()
        get_client.cache_clear()


api = FastAPI(title="Tubescope", version="0.1.0", lifespan=lifespan)
api.include_router(channels_router)
api.include_router(videos_router)
api.include_router(egress_router)


# --- Exception handlers ---

@api.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error_code": "not_found", "message": str(exc)})


@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"error_code": "auth_error", "message": str(exc)})


@api.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    return JSONResponse(status_code=429, content={"error_code": "rate_limit", "message": str(exc)})


@api.exception_handler(InvalidInputError)
async def invalid_input_error_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=400, content={"error_code": "invalid_input", "message": str(exc)})


@api.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(status_code=400, content={"error_code": "configuration_error", "message": str(exc)})


@api.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    logger.warning("Upstream call failed: %s", exc)
    return JSONResponse(status_code=502, content={"error_code": "upstream_error", "message": str(exc)})


def run():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "tubescope.main:api",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
