"""API application factory."""

from __future__ import annotations

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from stockboard.core.config import settings
from stockboard.core.exceptions import register_exception_handlers
from stockboard.core.logging import get_logger, request_id_var
from stockboard.schemas.common import ErrorResponse

from .routes import financials, health, market, prices, quotes, stocks


logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database engine on startup and dispose it on shutdown."""
    from stockboard.database.connection import (
        close_sqlalchemy_engine,
        init_sqlalchemy_engine,
    )

    try:
        await init_sqlalchemy_engine()
    except Exception as e:
        logger.warning(f"Database engine initialization failed: {e}")

    yield

    try:
        await close_sqlalchemy_engine()
    except Exception as e:
        logger.warning(f"Database engine cleanup failed: {e}")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add request ID to all requests for tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request_id_var.set(request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - start_time
        path = request.url.path

        logger.info(
            f"{request.method} {path} -> {response.status_code} ({duration:.3f}s)",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": int(duration * 1000),
            },
        )

        return response


def add_common_middleware(app: FastAPI) -> None:
    """Request ID, logging, security headers and CORS (last added is outermost)."""
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    # Read-only API: GET only
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )


def create_api_app(with_middleware: bool = True) -> FastAPI:
    """Create and configure the API application.

    Mounted under the dashboard app the outer app carries the middleware
    stack, so it is only added here when the API runs on its own.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Read-only stock market dashboard API",
        root_path=settings.root_path,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        responses={
            404: {"model": ErrorResponse, "description": "Not Found"},
            422: {"model": ErrorResponse, "description": "Validation Error"},
            500: {"model": ErrorResponse, "description": "Internal Server Error"},
        },
    )

    if with_middleware:
        add_common_middleware(app)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(stocks.router, tags=["Stocks"])
    app.include_router(quotes.router, tags=["Quotes"])
    app.include_router(prices.router, tags=["Prices"])
    app.include_router(market.router, tags=["Market"])
    app.include_router(financials.router, tags=["Financials"])

    return app
