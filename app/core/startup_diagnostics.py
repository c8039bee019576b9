"""
Startup Diagnostics Module
-------------------------
Service connectivity checks run during application startup, with clear,
actionable error output when PostgreSQL or Redis is unavailable.
"""

from dataclasses import dataclass
from typing import Optional, Dict, List
from loguru import logger
from sqlalchemy import text

from app.core.config_manager import settings
from app.core.database_connection import db_manager
from app.core.redis_connection import redis_manager


@dataclass
class ServiceStatus:
    """Track service connection status with detailed error information."""

    name: str
    status: str  # "connected", "failed", "skipped"
    error_message: Optional[str] = None
    suggestion: Optional[str] = None
    connection_details: Optional[Dict[str, str]] = None


def _database_details() -> Dict[str, str]:
    return {
        "host": settings.database_host,
        "port": str(settings.database_port),
        "database": settings.database_name,
    }


def _redis_details() -> Dict[str, str]:
    return {
        "host": settings.redis_host,
        "port": str(settings.redis_port),
        "database": str(settings.redis_db),
    }


def display_startup_failure(failed_services: List[ServiceStatus]):
    """Display formatted startup failure message."""
    border = "═" * 80
    print("\n" + border)
    print("[FATAL ERROR] APPLICATION STARTUP FAILED")
    print(border)

    for service in failed_services:
        print(f"\n[FATAL ERROR] {service.name}: {service.status.upper()}")
        print(f"   Error: {service.error_message}")

        if service.connection_details:
            print("   Connection Details:")
            for key, value in service.connection_details.items():
                print(f"     • {key}: {value}")

        if service.suggestion:
            print(f"   >> Suggestion: {service.suggestion}")

    print("\n" + border)
    print("Please fix the issues above and restart the application.")
    print(border + "\n")


def display_service_info():
    """Display endpoint and token settings once all services are healthy."""
    border_line = "═" * 80
    header_line = "─" * 80

    print("\n" + border_line)
    print("SERVICE ENDPOINTS & CONNECTION INFORMATION")
    print(border_line)

    local_api_base = f"http://localhost:{settings.fastapi_port}"
    print("FASTAPI SERVICE")
    print(header_line)
    print(f"{'Service':<20} | {'URL':<57}")
    print(f"{header_line}")
    print(f"{'Main API':<20} | {local_api_base + '/':<57}")
    print(f"{'Login':<20} | {local_api_base + '/api/login':<57}")
    print(f"{'API Documentation':<20} | {local_api_base + '/api/docs':<57}")
    print(f"{'Health Check':<20} | {local_api_base + '/api/v1/health':<57}")
    print(header_line)

    print("\nTOKENS")
    print(header_line)
    print(f"{'Parameter':<20} | {'Value':<57}")
    print(f"{header_line}")
    print(f"{'Algorithm':<20} | {settings.jwt_algorithm:<57}")
    print(f"{'TTL':<20} | {f'{settings.jwt_ttl_minutes} minutes':<57}")
    print(f"{'Revocation Backend':<20} | {settings.revocation_backend:<57}")
    print(header_line)

    print("\nPOSTGRESQL DATABASE")
    print(header_line)
    print(f"{'Parameter':<20} | {'Value':<57}")
    print(f"{header_line}")
    print(f"{'Host':<20} | {settings.database_host:<57}")
    print(f"{'Port':<20} | {str(settings.database_port):<57}")
    print(f"{'Database':<20} | {settings.database_name:<57}")
    print(header_line)

    if settings.revocation_backend == "redis":
        print("\nREDIS REVOCATION STORE")
        print(header_line)
        print(f"{'Parameter':<20} | {'Value':<57}")
        print(f"{header_line}")
        print(f"{'Host':<20} | {settings.redis_host:<57}")
        print(f"{'Port':<20} | {str(settings.redis_port):<57}")
        print(f"{'Database':<20} | {str(settings.redis_db):<57}")
        print(header_line)
    print(border_line + "\n")

    logger.info("Service endpoints and connection information displayed")


async def verify_database_connectivity() -> ServiceStatus:
    """Verify database connectivity with detailed error reporting."""
    try:
        async with db_manager.get_session() as session:
            result = await session.execute(text("SELECT 1"))
            if result.scalar() != 1:
                return ServiceStatus(
                    name="PostgreSQL",
                    status="failed",
                    error_message="Connection test query failed",
                    suggestion="Check database permissions and query execution",
                    connection_details=_database_details(),
                )
            return ServiceStatus(
                name="PostgreSQL",
                status="connected",
                connection_details=_database_details(),
            )
    except ConnectionRefusedError:
        return ServiceStatus(
            name="PostgreSQL",
            status="failed",
            error_message="Connection refused - PostgreSQL is not running or not accessible",
            suggestion=f"Start PostgreSQL server or check if it's running on {settings.database_host}:{settings.database_port}",
            connection_details=_database_details(),
        )
    except Exception as e:
        return ServiceStatus(
            name="PostgreSQL",
            status="failed",
            error_message=str(e),
            suggestion="Check database configuration in .env file and verify credentials",
            connection_details=_database_details(),
        )


async def verify_redis_connectivity() -> ServiceStatus:
    """Verify Redis connectivity with detailed error reporting."""
    if settings.revocation_backend != "redis":
        return ServiceStatus(name="Redis", status="skipped")

    try:
        if not await redis_manager.ping():
            return ServiceStatus(
                name="Redis",
                status="failed",
                error_message="Redis server did not respond to ping",
                suggestion="Check if Redis server is running and accessible",
                connection_details=_redis_details(),
            )
        return ServiceStatus(
            name="Redis",
            status="connected",
            connection_details=_redis_details(),
        )
    except Exception as e:
        return ServiceStatus(
            name="Redis",
            status="failed",
            error_message=str(e),
            suggestion="Check Redis configuration in .env file and verify credentials",
            connection_details=_redis_details(),
        )
