"""
Token Revocation Registry
-------------------------
Tracks token ids invalidated by logout until the tokens would have
expired naturally. After that point the token fails verification on its
own, so the entry can be dropped.

Backends:
- InMemoryRevocationRegistry: lock-guarded dict, swept lazily on lookup
  and periodically by sweep_periodically()
- RedisRevocationRegistry: one key per token id with a TTL matching the
  token's remaining lifetime; Redis handles expiry
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

from loguru import logger
from redis.exceptions import RedisError

from app.auth.exceptions import RevocationStoreError
from app.auth.jwt_utils import utc_now_seconds
from app.core.config_manager import settings
from app.core.redis_connection import RedisManager, redis_manager


class RevocationRegistry(ABC):
    """Interface shared by all revocation backends."""

    @abstractmethod
    async def revoke(self, token_id: str, expires_at: int) -> None:
        """Mark a token id revoked until ``expires_at``. Idempotent."""

    @abstractmethod
    async def is_revoked(self, token_id: str) -> bool:
        """True iff a non-expired revocation exists for ``token_id``."""

    @abstractmethod
    async def sweep(self, now: Optional[int] = None) -> int:
        """Drop entries whose expiry is <= now. Returns the number dropped."""


class InMemoryRevocationRegistry(RevocationRegistry):
    """Process-local registry. Suitable for a single worker process."""

    def __init__(self, clock: Callable[[], int] = utc_now_seconds):
        self._entries: Dict[str, int] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    async def revoke(self, token_id: str, expires_at: int) -> None:
        if expires_at <= self._clock():
            logger.debug(f"Token {token_id} already expired, revocation not stored")
            return

        with self._lock:
            current = self._entries.get(token_id)
            if current is None or current < expires_at:
                self._entries[token_id] = expires_at

        logger.info(f"Token {token_id} revoked until {expires_at}")

    async def is_revoked(self, token_id: str) -> bool:
        now = self._clock()
        with self._lock:
            expires_at = self._entries.get(token_id)
            if expires_at is None:
                return False
            if expires_at <= now:
                del self._entries[token_id]
                return False
            return True

    async def sweep(self, now: Optional[int] = None) -> int:
        now = self._clock() if now is None else now
        with self._lock:
            expired = [
                token_id
                for token_id, expires_at in self._entries.items()
                if expires_at <= now
            ]
            for token_id in expired:
                del self._entries[token_id]

        if expired:
            logger.debug(f"Swept {len(expired)} expired revocation entries")
        return len(expired)


class RedisRevocationRegistry(RevocationRegistry):
    """Registry shared by every worker through Redis."""

    def __init__(
        self,
        manager: Optional[RedisManager] = None,
        key_prefix: Optional[str] = None,
        clock: Callable[[], int] = utc_now_seconds,
    ):
        self._manager = manager or redis_manager
        self._key_prefix = (
            key_prefix if key_prefix is not None else settings.revocation_key_prefix
        )
        self._clock = clock

    def _key(self, token_id: str) -> str:
        return f"{self._key_prefix}{token_id}"

    async def revoke(self, token_id: str, expires_at: int) -> None:
        ttl_seconds = expires_at - self._clock()
        if ttl_seconds <= 0:
            logger.debug(f"Token {token_id} already expired, revocation not stored")
            return

        try:
            # NX keeps the first entry; a repeated revoke is a no-op
            await self._manager.client.set(
                self._key(token_id), expires_at, ex=ttl_seconds, nx=True
            )
        except RedisError as e:
            logger.error(f"Failed to store revocation for token {token_id}: {e}")
            raise RevocationStoreError("Revocation store unavailable") from e

        logger.info(f"Token {token_id} revoked until {expires_at}")

    async def is_revoked(self, token_id: str) -> bool:
        try:
            return await self._manager.client.exists(self._key(token_id)) > 0
        except RedisError as e:
            logger.error(f"Failed to look up revocation for token {token_id}: {e}")
            raise RevocationStoreError("Revocation store unavailable") from e

    async def sweep(self, now: Optional[int] = None) -> int:
        # Keys carry their own TTL
        return 0


def build_revocation_registry(backend: Optional[str] = None) -> RevocationRegistry:
    """Create the registry selected by ``backend`` (defaults to settings)."""
    backend = (backend or settings.revocation_backend).lower()
    if backend == "redis":
        logger.info("Using Redis revocation registry")
        return RedisRevocationRegistry()
    if backend == "memory":
        logger.info("Using in-memory revocation registry")
        return InMemoryRevocationRegistry()
    raise ValueError(f"Unknown revocation backend '{backend}'")


async def sweep_periodically(
    registry: RevocationRegistry, interval_seconds: int
) -> None:
    """Sweep ``registry`` every ``interval_seconds`` until cancelled."""
    logger.info(f"Revocation sweep scheduled every {interval_seconds}s")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await registry.sweep()
        except RevocationStoreError as e:
            logger.error(f"Revocation sweep failed: {e}")
