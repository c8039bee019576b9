"""
FastAPI Application Entry Point
-------------------------------
Main application initialization and configuration.
Registers routers, exception handlers, middleware, and lifecycle handlers.
"""

import asyncio
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.core import logger_setup  # noqa: F401  (configures sinks on import)
from app.core.config_manager import settings
from app.core.database_connection import db_manager
from app.core.redis_connection import redis_manager
from app.core.startup_diagnostics import (
    display_startup_failure,
    display_service_info,
    verify_database_connectivity,
    verify_redis_connectivity,
)
from app.api import health_endpoints
from app.api.auth_endpoints import router as auth_router
from app.api.error_handlers import register_exception_handlers
from app.auth.dependencies import get_revocation_registry
from app.auth.revocation_registry import InMemoryRevocationRegistry, sweep_periodically
from app.psql_db_services.users_service import UsersService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager with graceful error handling."""

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Debug mode: {settings.debug}")

    service_statuses = []

    # Check PostgreSQL
    logger.info("Checking PostgreSQL connectivity...")
    await db_manager.initialize()
    postgres_status = await verify_database_connectivity()
    service_statuses.append(postgres_status)

    if postgres_status.status == "connected":
        logger.info("[SUCCESS] PostgreSQL connected and ready")
        try:
            await UsersService().ensure_schema()
        except Exception as e:
            postgres_status.status = "failed"
            postgres_status.error_message = f"Could not prepare users table: {e}"
            postgres_status.suggestion = "Check that the database user may create tables"
    else:
        logger.error(f"[FAILED] PostgreSQL: {postgres_status.error_message}")

    # Redis is only needed when it stores revoked tokens
    if settings.revocation_backend == "redis":
        logger.info("Checking Redis connectivity...")
        redis_manager.initialize()
        redis_status = await verify_redis_connectivity()
        service_statuses.append(redis_status)

        if redis_status.status == "connected":
            logger.info("[SUCCESS] Redis connected and ready")
        else:
            logger.error(f"[FAILED] Redis: {redis_status.error_message}")

    failed_services = [s for s in service_statuses if s.status == "failed"]

    if failed_services:
        display_startup_failure(failed_services)
        logger.error(
            f"Application startup failed: {len(failed_services)} service(s) unavailable"
        )
        os._exit(1)  # Exit immediately without traceback

    sweep_task = None
    registry = get_revocation_registry()
    if (
        isinstance(registry, InMemoryRevocationRegistry)
        and settings.revocation_sweep_interval_seconds > 0
    ):
        sweep_task = asyncio.create_task(
            sweep_periodically(registry, settings.revocation_sweep_interval_seconds)
        )

    display_service_info()
    logger.info("[SUCCESS] Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application")
    if sweep_task is not None:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            pass

    try:
        await db_manager.close()
        await redis_manager.close()
        logger.info("Application shutdown complete")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Minimal JWT authentication API with login, logout, me and register",
    lifespan=lifespan,
    debug=settings.debug,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    swagger_ui_parameters={"displayRequestDuration": True},
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(health_endpoints.router)
app.include_router(auth_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with basic information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": "/api/docs",
        "redoc": "/api/redoc",
        "openapi": "/api/openapi.json",
    }
