"""
Health Check Endpoints
---------------------
Health monitoring endpoints for the service and its dependencies.
PostgreSQL is always checked; Redis only when it backs token revocation.
"""

from datetime import datetime, timezone
from fastapi import APIRouter
from loguru import logger
from sqlalchemy import text

from app.models.response_models import HealthStatus, DependencyHealth
from app.core.config_manager import settings
from app.core.database_connection import db_manager
from app.core.redis_connection import redis_manager


router = APIRouter(prefix="/api/v1/health", tags=["Health"])


@router.get("/", response_model=HealthStatus)
async def health_check():
    """
    Basic health check endpoint.
    Returns service status and version information.
    """
    logger.debug("Health check requested")

    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
    )


@router.get("/dependencies", response_model=DependencyHealth, status_code=200)
async def check_dependencies():
    """
    Check health of the infrastructure the auth service depends on.

    Always answers 200; the body carries per-component results and an
    overall status so monitoring can decide what is critical.
    """
    logger.debug("Dependency health check requested")

    postgresql_healthy = await _check_database()

    redis_healthy = None
    if settings.revocation_backend == "redis":
        redis_healthy = await _check_redis()

    all_healthy = postgresql_healthy and redis_healthy is not False
    status = "healthy" if all_healthy else "unhealthy"

    if not all_healthy:
        logger.warning(
            f"Infrastructure health check detected issues: "
            f"postgresql={postgresql_healthy}, redis={redis_healthy}"
        )
    else:
        logger.info("All infrastructure components healthy")

    return DependencyHealth(
        postgresql=postgresql_healthy,
        redis=redis_healthy,
        status=status,
        timestamp=datetime.now(timezone.utc),
    )


async def _check_database() -> bool:
    """
    Check PostgreSQL database connectivity.

    Returns:
        bool: True if database is accessible
    """
    try:
        async with db_manager.get_session() as session:
            result = await session.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def _check_redis() -> bool:
    """
    Check Redis connectivity.

    Returns:
        bool: True if Redis is accessible
    """
    try:
        return await redis_manager.ping()
    except Exception as e:
        logger.error(f"Redis health check failed: {e}")
        return False
