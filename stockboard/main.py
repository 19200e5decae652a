"""Main application entry point with app factory and lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from stockboard.api.app import add_common_middleware, create_api_app
from stockboard.core.config import settings
from stockboard.core.exceptions import register_exception_handlers
from stockboard.core.logging import get_logger, setup_logging
from stockboard.database.connection import (
    close_sqlalchemy_engine,
    db_healthcheck,
    init_sqlalchemy_engine,
)
from stockboard.schemas.common import ServiceInfo
from stockboard.web import pages


logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # The engine connects lazily, so an unreachable database does not block startup
    await init_sqlalchemy_engine()
    if await db_healthcheck():
        logger.info("Database connected")
    else:
        logger.warning("Database unreachable at startup; requests will fail until it recovers")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_sqlalchemy_engine()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create the main FastAPI application: JSON API under /api plus dashboard pages."""
    api_app = create_api_app(with_middleware=False)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    add_common_middleware(app)
    register_exception_handlers(app)

    app.mount("/api", api_app)
    app.include_router(pages.router)

    @app.get("/status", response_model=ServiceInfo, include_in_schema=False)
    async def service_status() -> ServiceInfo:
        return ServiceInfo(
            name=settings.app_name,
            version=settings.app_version,
            docs="/api/docs" if settings.debug else None,
            health="/api/health",
        )

    return app


# Application instance
app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "stockboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
