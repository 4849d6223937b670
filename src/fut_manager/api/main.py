"""
FastAPI application for the FUT Manager API.

Serves the player catalog, manager accounts, seasons, results and packs.
The database pool and cache are created once per process in the lifespan
and handed to handlers through app.state.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import msgspec
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from .cache import HybridCache
from .dependencies import CacheDependency
from .errors import APIError, api_error_handler
from .routers import managers, packs, players, results, seasons
from ..core.config import Settings, get_settings
from ..repositories import RepositorySet, get_repositories

logger = logging.getLogger(__name__)


class MSGSpecResponse(Response):
    """Response class using msgspec for JSON serialization."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        if content is None:
            return b""
        return msgspec.json.encode(content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.

    Startup:
    - Open the database pool and build repositories (unless injected)
    - Connect the cache (unless injected)

    Shutdown:
    - Close the database pool if this lifespan opened it
    """
    settings: Settings = app.state.settings
    logger.info("Starting %s...", settings.app_name)

    owned_db = None
    if app.state.repositories is None:
        from ..pg_connection import PostgresDB

        owned_db = PostgresDB.from_settings(settings)
        owned_db.open()
        app.state.db = owned_db
        app.state.repositories = get_repositories(owned_db)

    if app.state.cache is None:
        app.state.cache = HybridCache(
            redis_url=settings.redis_url,
            default_ttl=settings.cache_default_ttl,
            prefix=settings.cache_prefix,
        )

    yield

    logger.info("Shutting down %s...", settings.app_name)
    if owned_db is not None:
        try:
            owned_db.close()
        except Exception as e:
            logger.warning(f"Error closing database connections: {e}")


def create_app(
    settings: Settings | None = None,
    repositories: RepositorySet | None = None,
    cache: HybridCache | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to environment settings)
        repositories: Pre-built repositories; when omitted a PostgreSQL pool
            is opened at startup
        cache: Pre-built cache; when omitted one is connected at startup

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Fantasy football manager game: players, managers, seasons and standings",
        version=settings.app_version,
        default_response_class=MSGSpecResponse,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repositories = repositories
    app.state.cache = cache
    app.state.db = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        allow_credentials=settings.cors_allow_credentials,
        expose_headers=settings.cors_expose_headers,
    )

    @app.middleware("http")
    async def add_process_time(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000
        response.headers["X-Process-Time"] = f"{process_time:.2f}ms"
        return response

    app.add_exception_handler(APIError, api_error_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with consistent format."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        show_detail = settings.debug and settings.environment != "production"
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal error occurred",
                    "detail": str(exc) if show_detail else None,
                }
            },
        )

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now(tz=timezone.utc).isoformat()}

    @app.get("/health/db", tags=["health"])
    def health_check_db(request: Request):
        """Database connectivity health check."""
        db = request.app.state.db
        try:
            if db is None or not db.ping():
                raise RuntimeError("database not configured")
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "database": "disconnected",
                    "timestamp": datetime.now(tz=timezone.utc).isoformat(),
                },
            )
        return {
            "status": "healthy",
            "database": "connected",
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    @app.get("/health/cache", tags=["health"])
    def health_check_cache(cache: CacheDependency):
        return {
            "status": "healthy",
            "cache": cache.get_stats(),
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        }

    @app.get("/", tags=["root"])
    async def root():
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "running",
            "docs": "/docs",
        }

    prefix = settings.api_prefix

    @app.get(f"{prefix}/cleanRedis", tags=["cache"])
    def clean_cache(cache: CacheDependency):
        """Drop every cached player list (top players and random-draw pools)."""
        removed = cache.clear()
        return {"message": "Cache data removed", "removed": removed}

    app.include_router(players.router, prefix=f"{prefix}/player", tags=["players"])
    app.include_router(managers.router, prefix=f"{prefix}/manager", tags=["managers"])
    app.include_router(seasons.router, prefix=prefix, tags=["seasons"])
    app.include_router(results.router, prefix=f"{prefix}/result", tags=["results"])
    app.include_router(packs.router, prefix=f"{prefix}/pack", tags=["packs"])

    return app


app = create_app()
