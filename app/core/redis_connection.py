"""
Redis Connection Manager
------------------------
Manages the Redis connection pool backing the token revocation registry.
Provides an async Redis client with connection pooling.

Revoked token ids are stored as plain keys with a TTL equal to the
token's remaining lifetime, so Redis drops them on its own once the
token could no longer verify anyway.
"""

from typing import Optional
import redis.asyncio as aioredis
from redis.asyncio.connection import ConnectionPool
from loguru import logger

from app.core.config_manager import settings


class RedisManager:
    """Manages Redis connection pool and client."""

    def __init__(self):
        """Initialize Redis manager."""
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[aioredis.Redis] = None

    def initialize(self) -> None:
        """
        Initialize Redis connection pool and client.
        Creates connection pool based on configuration.
        """
        if self._pool is not None:
            logger.warning("Redis connection pool already initialized")
            return

        logger.info(
            f"Initializing Redis connection to {settings.redis_host}:{settings.redis_port}"
        )

        self._pool = ConnectionPool(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
            password=settings.redis_password,
            max_connections=settings.redis_max_connections,
            decode_responses=True,  # Auto-decode responses to strings
            socket_connect_timeout=5,
            socket_keepalive=True,
            health_check_interval=30,
        )

        self._client = aioredis.Redis(connection_pool=self._pool)

        logger.info("Redis connection initialized successfully")

    async def close(self) -> None:
        """Close Redis connection pool and cleanup."""
        if self._client is None:
            return

        logger.info("Closing Redis connections")
        await self._client.aclose()
        await self._pool.disconnect()
        self._client = None
        self._pool = None
        logger.info("Redis connections closed")

    async def ping(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            bool: True if Redis is responsive, False otherwise
        """
        try:
            if self._client is None:
                return False
            return await self._client.ping()
        except Exception as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    @property
    def client(self) -> aioredis.Redis:
        """
        Get Redis client.

        Returns:
            aioredis.Redis: Redis client instance

        Raises:
            RuntimeError: If Redis not initialized
        """
        if self._client is None:
            raise RuntimeError("Redis not initialized. Call initialize() first.")
        return self._client


# Global Redis manager instance
redis_manager = RedisManager()
