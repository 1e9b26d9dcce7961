"""
FastAPI application with assembled routers.

Initializes the FastAPI app, registers middleware and routers under the
configured API prefix, and runs uvicorn when executed directly.

Dependencies: fastapi, uvicorn, docchat.api.routers, docchat.observability
System role: API entry point
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docchat import __version__
from docchat.api import api_router
from docchat.api.deps.dependencies import get_service_cache
from docchat.boundary.db.connection import get_async_engine
from docchat.configs import get_settings
from docchat.observability.logger import configure_logging
from docchat.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging on startup; drops cached clients and closes the
    connection pool on shutdown.
    """
    configure_logging(get_settings().log_level)
    logger.info("Application startup: logging configured")

    yield

    get_service_cache().clear()
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()

    app = FastAPI(
        title="DocChat API",
        description="Upload documents and ask questions answered with cited sources",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last = outermost, so CORS preflights are logged and carry the correlation id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docchat.api.main:app",
        host="0.0.0.0",
        port=8082,
        reload=get_settings().debug,
    )
