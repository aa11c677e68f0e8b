# src/slot_api/main.py
"""Main entry point for the slot. backend."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from slot_api.api import admin_router, public_router
from slot_api.core.logging_config import configure_logging
from slot_api.core.settings import settings
from slot_api.db.session import SessionLocal, create_tables
from slot_api.services.config_store import ConfigStore
from slot_api.services.errors import RateLimited, SlotError, StoreUnavailable
from slot_api.services.rate_limit import get_rate_limiter

logger = logging.getLogger(__name__)

RATE_LIMITED_PREFIX = "/api/"


def initialize_database() -> None:
    """Create missing tables (when enabled) and seed default config."""
    if settings.auto_create_tables:
        create_tables()
    db = SessionLocal()
    try:
        ConfigStore(db).seed_defaults()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.log_level)
    initialize_database()
    logger.info("%s backend running on port %s", settings.app_name, settings.port)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="slot. API",
    description="Daily drop counter with streaks and runtime feature flags",
    version=settings.app_version,
    lifespan=lifespan,
)


@app.middleware("http")
async def rate_limit_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Apply the fixed-window budget to every /api/ request."""
    if request.url.path.startswith(RATE_LIMITED_PREFIX) and request.method != "OPTIONS":
        caller = request.client.host if request.client else ""
        if not await run_in_threadpool(get_rate_limiter().hit, caller):
            error = RateLimited()
            return JSONResponse(status_code=error.status_code, content={"error": error.message})
    return await call_next(request)


# Added after the rate limiter so it wraps it and 429s carry CORS headers.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.exception_handler(SlotError)
async def slot_error_handler(_: Request, exc: SlotError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    error = StoreUnavailable()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    error = StoreUnavailable()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


# Include API routers
app.include_router(public_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("slot_api.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)
